"""Booking rules: date-range validation, availability and pricing."""

import logging
import math
import uuid
from datetime import UTC, datetime, timedelta

from app.core.exceptions import (
    BookingStateError,
    CarNotAvailableError,
    InvalidDateRangeError,
    PermissionDeniedError,
    ResourceNotFoundError,
)
from app.models.booking import Booking, BookingStatus
from app.models.car import Car, PriceGroup
from app.models.user import User
from app.repositories.bookings import BookingRepository
from app.repositories.cars import CarRepository

logger = logging.getLogger(__name__)

MIN_BOOKING_DURATION = timedelta(hours=1)


def to_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def validate_date_range(start: datetime, end: datetime, now: datetime | None = None) -> None:
    """Raise InvalidDateRangeError unless start is in the future and end is at least an hour later."""
    start, end = to_utc(start), to_utc(end)
    now = now or datetime.now(UTC)
    if not end > start:
        raise InvalidDateRangeError("Booking end date must be after the booking start date.")
    if end - start < MIN_BOOKING_DURATION:
        raise InvalidDateRangeError("Booking duration must be at least 1 hour(s).")
    if start < now:
        raise InvalidDateRangeError("Booking start date must not be in the past.")


def calculate_total_price(car: Car, start: datetime, end: datetime) -> float:
    """Daily rate of the car's price group times the number of started days."""
    days = max(1, math.ceil((to_utc(end) - to_utc(start)) / timedelta(days=1)))
    return round(PriceGroup(car.price_group).daily_rate * days, 2)


def get_booking_or_404(bookings: BookingRepository, booking_uuid: uuid.UUID) -> Booking:
    booking = bookings.find_by_uuid(booking_uuid)
    if booking is None:
        raise ResourceNotFoundError(f"Booking {booking_uuid} not found.")
    return booking


def create_booking(
    bookings: BookingRepository,
    cars: CarRepository,
    user: User,
    car_uuid: uuid.UUID,
    start: datetime,
    end: datetime,
) -> Booking:
    validate_date_range(start, end)
    start, end = to_utc(start), to_utc(end)

    # Lock the car row so two overlapping requests for it are serialized.
    car = cars.find_by_uuid(car_uuid, for_update=True)
    if car is None:
        raise ResourceNotFoundError(f"Car {car_uuid} not found.")
    if not car.available:
        raise CarNotAvailableError(f"Car {car_uuid} is not available for booking.")
    if bookings.has_overlap(car.id, start, end):
        raise CarNotAvailableError(f"Car {car_uuid} is already booked for the requested period.")

    booking = Booking(
        user_id=user.id,
        car_id=car.id,
        start_date=start,
        end_date=end,
        status=BookingStatus.CONFIRMED.value,
        total_price=calculate_total_price(car, start, end),
    )
    booking = bookings.save(booking)
    logger.info("Booking %s created for user_id=%s car=%s", booking.uuid, user.id, car_uuid)
    return booking


def cancel_booking(
    bookings: BookingRepository,
    booking: Booking,
    actor: User,
    by_admin: bool = False,
) -> Booking:
    """Cancel a confirmed booking. Non-admins may only cancel their own."""
    if not by_admin and booking.user_id != actor.id:
        raise PermissionDeniedError("You can only cancel your own bookings.")
    if booking.status != BookingStatus.CONFIRMED.value:
        raise BookingStateError(
            f"Only confirmed bookings can be cancelled (current status: {booking.status})."
        )
    booking.status = (
        BookingStatus.ADMIN_CANCELLED.value if by_admin else BookingStatus.USER_CANCELLED.value
    )
    booking = bookings.save(booking)
    logger.info("Booking %s cancelled by user_id=%s (admin=%s)", booking.uuid, actor.id, by_admin)
    return booking
