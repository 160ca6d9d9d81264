"""Customer rentals: start from a booking, current rental and history."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.repositories.bookings import BookingRepository
from app.repositories.rentals import RentalRepository
from app.schemas.envelope import ApiResponse, ok
from app.schemas.rental import RentalCreateRequest, RentalResponse
from app.services.rentals import get_own_rental, start_rental

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[RentalResponse],
    status_code=status.HTTP_201_CREATED,
)
def post_rental(
    body: RentalCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse:
    """
    Start a rental from one of your CONFIRMED bookings.

    Fails with 409 when the booking is not confirmed, the car is unavailable,
    or you already have a pending or active rental.
    """
    rental = start_rental(
        RentalRepository(db), BookingRepository(db), current_user, body.booking_uuid
    )
    return ok(RentalResponse.from_rental(rental))


@router.get("", response_model=ApiResponse[list[RentalResponse]])
def list_my_rentals(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse:
    rentals = RentalRepository(db).list_for_user(current_user.id)
    return ok([RentalResponse.from_rental(r) for r in rentals])


@router.get("/current", response_model=ApiResponse[RentalResponse | None])
def get_current_rental(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse:
    """The pending or active rental, or null data when there is none."""
    rental = RentalRepository(db).find_open_for_user(current_user.id)
    return ok(RentalResponse.from_rental(rental) if rental else None)


@router.get("/{rental_uuid}", response_model=ApiResponse[RentalResponse])
def get_my_rental(
    rental_uuid: uuid.UUID,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse:
    return ok(RentalResponse.from_rental(get_own_rental(RentalRepository(db), rental_uuid, current_user)))
