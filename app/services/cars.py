"""Fleet management: create, update and soft-delete cars."""

import logging
import uuid

from app.core.exceptions import ResourceNotFoundError
from app.models.car import Car
from app.repositories.cars import CarRepository
from app.schemas.car import CarCreateRequest, CarUpdateRequest

logger = logging.getLogger(__name__)


def get_car_or_404(cars: CarRepository, car_uuid: uuid.UUID) -> Car:
    car = cars.find_by_uuid(car_uuid)
    if car is None:
        raise ResourceNotFoundError(f"Car {car_uuid} not found.")
    return car


def create_car(cars: CarRepository, body: CarCreateRequest) -> Car:
    car = Car(
        make=body.make.strip(),
        model=body.model.strip(),
        year=body.year,
        category=body.category.strip(),
        price_group=body.price_group.value,
        license_plate=body.license_plate.strip().upper(),
        available=body.available,
        deleted=False,
    )
    car = cars.save(car)
    logger.info("Created car %s (%s %s)", car.uuid, car.make, car.model)
    return car


def update_car(cars: CarRepository, car: Car, body: CarUpdateRequest) -> Car:
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "price_group" in changes:
        changes["price_group"] = body.price_group.value
    if "license_plate" in changes:
        changes["license_plate"] = changes["license_plate"].strip().upper()
    for name, value in changes.items():
        setattr(car, name, value)
    return cars.save(car)


def delete_car(cars: CarRepository, car: Car) -> Car:
    """Soft delete; existing bookings keep their reference to the car."""
    car.deleted = True
    car.available = False
    car = cars.save(car)
    logger.info("Soft-deleted car %s", car.uuid)
    return car
