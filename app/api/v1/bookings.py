"""Customer bookings: create and cancel."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.repositories.bookings import BookingRepository
from app.repositories.cars import CarRepository
from app.schemas.booking import BookingCreateRequest, BookingResponse
from app.schemas.envelope import ApiResponse, ok
from app.services.bookings import cancel_booking, create_booking, get_booking_or_404

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[BookingResponse],
    status_code=status.HTTP_201_CREATED,
)
def post_booking(
    body: BookingCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse:
    """
    Book a car for [startDate, endDate).

    Fails with 400 for an invalid range and 409 when the car is unavailable
    or already booked for an overlapping period.
    """
    booking = create_booking(
        BookingRepository(db),
        CarRepository(db),
        current_user,
        body.car_uuid,
        body.start_date,
        body.end_date,
    )
    return ok(BookingResponse.from_booking(booking))


@router.post("/{booking_uuid}/cancel", response_model=ApiResponse[BookingResponse])
def cancel_my_booking(
    booking_uuid: uuid.UUID,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse:
    bookings = BookingRepository(db)
    booking = get_booking_or_404(bookings, booking_uuid)
    booking = cancel_booking(bookings, booking, current_user)
    return ok(BookingResponse.from_booking(booking))
