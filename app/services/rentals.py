"""Rental lifecycle: start from a booking, hand-over, cancellation and return."""

import logging
import uuid
from datetime import UTC, datetime

from app.core.exceptions import (
    BookingStateError,
    CarNotAvailableError,
    PermissionDeniedError,
    RentalStateError,
    ResourceNotFoundError,
    UserAlreadyRentingError,
)
from app.models.booking import BookingStatus
from app.models.rental import OPEN_RENTAL_STATUSES, Rental, RentalStatus
from app.models.user import User
from app.repositories.bookings import BookingRepository
from app.repositories.rentals import RentalRepository

logger = logging.getLogger(__name__)


def get_rental_or_404(
    rentals: RentalRepository, rental_uuid: uuid.UUID, for_update: bool = False
) -> Rental:
    rental = rentals.find_by_uuid(rental_uuid, for_update=for_update)
    if rental is None:
        raise ResourceNotFoundError(f"Rental {rental_uuid} not found.")
    return rental


def get_own_rental(rentals: RentalRepository, rental_uuid: uuid.UUID, user: User) -> Rental:
    rental = get_rental_or_404(rentals, rental_uuid)
    if rental.user_id != user.id:
        raise PermissionDeniedError("You can only view your own rentals.")
    return rental


def start_rental(
    rentals: RentalRepository,
    bookings: BookingRepository,
    user: User,
    booking_uuid: uuid.UUID,
) -> Rental:
    """
    Turn the user's CONFIRMED booking into a rental awaiting hand-over.

    The booking moves to RENTAL_INITIATED in the same commit. A user may hold
    only one pending or active rental at a time.
    """
    booking = bookings.find_by_uuid(booking_uuid, for_update=True)
    if booking is None:
        raise ResourceNotFoundError(f"Booking {booking_uuid} not found.")
    if booking.user_id != user.id:
        raise PermissionDeniedError("You can only rent from your own bookings.")
    if booking.status != BookingStatus.CONFIRMED.value:
        raise BookingStateError(
            f"Only confirmed bookings can start a rental (current status: {booking.status})."
        )
    current = rentals.find_open_for_user(user.id)
    if current is not None:
        car = current.car
        raise UserAlreadyRentingError(
            f"You are already renting {car.make} {car.model} {car.license_plate}."
        )
    if booking.car.deleted or not booking.car.available:
        raise CarNotAvailableError(f"Car {booking.car.uuid} is not available for rental at this time.")

    booking.status = BookingStatus.RENTAL_INITIATED.value
    rental = Rental(
        booking_id=booking.id,
        user_id=user.id,
        car_id=booking.car_id,
        status=RentalStatus.PENDING_CONFIRMATION.value,
        expected_return_date=booking.end_date,
        fine=0.0,
    )
    rental = rentals.save(rental)
    logger.info("Rental %s started from booking %s by user_id=%s", rental.uuid, booking.uuid, user.id)
    return rental


def confirm_rental(rentals: RentalRepository, rental: Rental, admin: User) -> Rental:
    """Hand the car over: PENDING_CONFIRMATION becomes ACTIVE and the car leaves the fleet."""
    if rental.status != RentalStatus.PENDING_CONFIRMATION.value:
        raise RentalStateError(
            f"Only rentals pending confirmation can be confirmed (current status: {rental.status})."
        )
    if rental.car.deleted or not rental.car.available:
        raise CarNotAvailableError(f"Car {rental.car.uuid} is not available for hand-over.")
    rental.status = RentalStatus.ACTIVE.value
    rental.issued_date = datetime.now(UTC)
    rental.issuer_id = admin.id
    rental.car.available = False
    rental = rentals.save(rental)
    logger.info("Rental %s confirmed by user_id=%s", rental.uuid, admin.id)
    return rental


def cancel_rental(rentals: RentalRepository, rental: Rental, admin: User) -> Rental:
    """Cancel a pending or active rental; the booking is marked ADMIN_CANCELLED."""
    if rental.status not in OPEN_RENTAL_STATUSES:
        raise RentalStateError(
            f"Only pending or active rentals can be cancelled (current status: {rental.status})."
        )
    if rental.status == RentalStatus.ACTIVE.value:
        rental.car.available = True
    rental.status = RentalStatus.CANCELLED.value
    rental.booking.status = BookingStatus.ADMIN_CANCELLED.value
    rental = rentals.save(rental)
    logger.info("Rental %s cancelled by user_id=%s", rental.uuid, admin.id)
    return rental


def complete_rental(
    rentals: RentalRepository, rental: Rental, admin: User, fine: float = 0.0
) -> Rental:
    """Take the car back: ACTIVE becomes COMPLETED, the fine is recorded and the car is released."""
    if rental.status != RentalStatus.ACTIVE.value:
        raise RentalStateError(
            f"Only active rentals can be completed (current status: {rental.status})."
        )
    if fine < 0:
        raise RentalStateError("Fine must not be negative.", field="fine")
    rental.status = RentalStatus.COMPLETED.value
    rental.returned_date = datetime.now(UTC)
    rental.receiver_id = admin.id
    rental.fine = round(fine, 2)
    rental.car.available = True
    rental = rentals.save(rental)
    logger.info("Rental %s completed by user_id=%s (fine=%.2f)", rental.uuid, admin.id, rental.fine)
    return rental
