"""Schemas for cars."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.models.car import Car, PriceGroup
from app.schemas.auth import CamelModel

CAR_YEAR_MIN = 1950
CAR_YEAR_MAX = 2100


class CarCreateRequest(CamelModel):
    make: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=100)
    year: int = Field(..., ge=CAR_YEAR_MIN, le=CAR_YEAR_MAX)
    category: str = Field(default="", max_length=50)
    price_group: PriceGroup = PriceGroup.STANDARD
    license_plate: str = Field(..., min_length=1, max_length=20)
    available: bool = True


class CarUpdateRequest(CamelModel):
    """Partial update; omitted fields are left unchanged."""

    make: str | None = Field(default=None, min_length=1, max_length=100)
    model: str | None = Field(default=None, min_length=1, max_length=100)
    year: int | None = Field(default=None, ge=CAR_YEAR_MIN, le=CAR_YEAR_MAX)
    category: str | None = Field(default=None, max_length=50)
    price_group: PriceGroup | None = None
    license_plate: str | None = Field(default=None, min_length=1, max_length=20)
    available: bool | None = None


class CarResponse(CamelModel):
    uuid: UUID
    make: str
    model: str
    year: int
    category: str
    price_group: PriceGroup
    license_plate: str
    available: bool
    daily_rate: float
    created_at: datetime | None = None

    @classmethod
    def from_car(cls, car: Car) -> "CarResponse":
        price_group = PriceGroup(car.price_group)
        return cls(
            uuid=car.uuid,
            make=car.make,
            model=car.model,
            year=car.year,
            category=car.category,
            price_group=price_group,
            license_plate=car.license_plate,
            available=car.available,
            daily_rate=price_group.daily_rate,
            created_at=car.created_at,
        )
