"""Administrative endpoints: users, fleet, bookings and rentals. ADMIN or SUPERADMIN only."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin, require_superadmin
from app.core.database import get_db
from app.models.rental import RentalStatus
from app.models.user import User
from app.repositories.bookings import BookingRepository
from app.repositories.cars import CarRepository
from app.repositories.refresh_tokens import RefreshTokenStore
from app.repositories.rentals import RentalRepository
from app.repositories.users import RoleRepository, UserRepository
from app.schemas.booking import BookingResponse
from app.schemas.car import CarCreateRequest, CarResponse, CarUpdateRequest
from app.schemas.envelope import ApiResponse, ok
from app.schemas.rental import RentalCompleteRequest, RentalResponse
from app.schemas.user import RolesUpdateRequest, UserResponse
from app.services.bookings import cancel_booking, get_booking_or_404
from app.services.cars import create_car, delete_car, get_car_or_404, update_car
from app.services.rentals import (
    cancel_rental,
    complete_rental,
    confirm_rental,
    get_rental_or_404,
)
from app.services.users import get_user_or_404, restore_user, set_user_roles, soft_delete_user

router = APIRouter()


# Users


@router.get("/users", response_model=ApiResponse[list[UserResponse]])
def list_users(
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
    include_deleted: Annotated[bool, Query(alias="includeDeleted")] = False,
) -> ApiResponse:
    users = UserRepository(db).list_users(include_deleted=include_deleted)
    return ok([UserResponse.from_user(u) for u in users])


@router.get("/users/{user_uuid}", response_model=ApiResponse[UserResponse])
def get_user(
    user_uuid: uuid.UUID,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
) -> ApiResponse:
    return ok(UserResponse.from_user(get_user_or_404(UserRepository(db), user_uuid)))


@router.delete("/users/{user_uuid}", response_model=ApiResponse[UserResponse])
def delete_user(
    user_uuid: uuid.UUID,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
) -> ApiResponse:
    """Soft-delete the user and revoke their refresh token."""
    users = UserRepository(db)
    target = get_user_or_404(users, user_uuid)
    target = soft_delete_user(users, RefreshTokenStore(db), target, admin)
    return ok(UserResponse.from_user(target))


@router.post("/users/{user_uuid}/restore", response_model=ApiResponse[UserResponse])
def restore(
    user_uuid: uuid.UUID,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
) -> ApiResponse:
    users = UserRepository(db)
    target = restore_user(users, get_user_or_404(users, user_uuid), admin)
    return ok(UserResponse.from_user(target))


@router.put("/users/{user_uuid}/roles", response_model=ApiResponse[UserResponse])
def put_user_roles(
    user_uuid: uuid.UUID,
    body: RolesUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    _superadmin: Annotated[User, Depends(require_superadmin)],
) -> ApiResponse:
    """Replace a user's roles. SUPERADMIN only."""
    users = UserRepository(db)
    target = get_user_or_404(users, user_uuid)
    target = set_user_roles(users, RoleRepository(db), target, body.roles)
    return ok(UserResponse.from_user(target))


# Cars


@router.get("/cars", response_model=ApiResponse[list[CarResponse]])
def list_cars(
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
    include_deleted: Annotated[bool, Query(alias="includeDeleted")] = False,
) -> ApiResponse:
    cars = CarRepository(db).list_all(include_deleted=include_deleted)
    return ok([CarResponse.from_car(c) for c in cars])


@router.post(
    "/cars",
    response_model=ApiResponse[CarResponse],
    status_code=status.HTTP_201_CREATED,
)
def post_car(
    body: CarCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
) -> ApiResponse:
    return ok(CarResponse.from_car(create_car(CarRepository(db), body)))


@router.put("/cars/{car_uuid}", response_model=ApiResponse[CarResponse])
def put_car(
    car_uuid: uuid.UUID,
    body: CarUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
) -> ApiResponse:
    cars = CarRepository(db)
    car = update_car(cars, get_car_or_404(cars, car_uuid), body)
    return ok(CarResponse.from_car(car))


@router.delete("/cars/{car_uuid}", response_model=ApiResponse[CarResponse])
def remove_car(
    car_uuid: uuid.UUID,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
) -> ApiResponse:
    cars = CarRepository(db)
    return ok(CarResponse.from_car(delete_car(cars, get_car_or_404(cars, car_uuid))))


# Bookings


@router.get("/bookings", response_model=ApiResponse[list[BookingResponse]])
def list_bookings(
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
) -> ApiResponse:
    return ok([BookingResponse.from_booking(b) for b in BookingRepository(db).list_all()])


@router.post("/bookings/{booking_uuid}/cancel", response_model=ApiResponse[BookingResponse])
def admin_cancel_booking(
    booking_uuid: uuid.UUID,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
) -> ApiResponse:
    bookings = BookingRepository(db)
    booking = get_booking_or_404(bookings, booking_uuid)
    booking = cancel_booking(bookings, booking, admin, by_admin=True)
    return ok(BookingResponse.from_booking(booking))


# Rentals


@router.get("/rentals", response_model=ApiResponse[list[RentalResponse]])
def list_rentals(
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
    rental_status: Annotated[RentalStatus | None, Query(alias="status")] = None,
) -> ApiResponse:
    rentals = RentalRepository(db).list_all(rental_status.value if rental_status else None)
    return ok([RentalResponse.from_rental(r) for r in rentals])


@router.get("/rentals/{rental_uuid}", response_model=ApiResponse[RentalResponse])
def get_rental(
    rental_uuid: uuid.UUID,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[User, Depends(require_admin)],
) -> ApiResponse:
    return ok(RentalResponse.from_rental(get_rental_or_404(RentalRepository(db), rental_uuid)))


@router.post("/rentals/{rental_uuid}/confirm", response_model=ApiResponse[RentalResponse])
def admin_confirm_rental(
    rental_uuid: uuid.UUID,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
) -> ApiResponse:
    """Hand the car over to the customer."""
    rentals = RentalRepository(db)
    rental = confirm_rental(rentals, get_rental_or_404(rentals, rental_uuid, for_update=True), admin)
    return ok(RentalResponse.from_rental(rental))


@router.post("/rentals/{rental_uuid}/cancel", response_model=ApiResponse[RentalResponse])
def admin_cancel_rental(
    rental_uuid: uuid.UUID,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
) -> ApiResponse:
    rentals = RentalRepository(db)
    rental = cancel_rental(rentals, get_rental_or_404(rentals, rental_uuid, for_update=True), admin)
    return ok(RentalResponse.from_rental(rental))


@router.post("/rentals/{rental_uuid}/complete", response_model=ApiResponse[RentalResponse])
def admin_complete_rental(
    rental_uuid: uuid.UUID,
    body: RentalCompleteRequest,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
) -> ApiResponse:
    """Take the car back and record any fine."""
    rentals = RentalRepository(db)
    rental = get_rental_or_404(rentals, rental_uuid, for_update=True)
    rental = complete_rental(rentals, rental, admin, fine=body.fine)
    return ok(RentalResponse.from_rental(rental))
