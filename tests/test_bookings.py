"""Tests for booking rules: date ranges, pricing, overlap checks and cancellation."""

import unittest
import uuid
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

from app.core.exceptions import (
    BookingStateError,
    CarNotAvailableError,
    InvalidDateRangeError,
    PermissionDeniedError,
    ResourceNotFoundError,
)
from app.models import BookingStatus, Car, PriceGroup, RoleName
from app.repositories.bookings import BookingRepository
from app.repositories.cars import CarRepository
from app.services.bookings import (
    calculate_total_price,
    cancel_booking,
    create_booking,
    validate_date_range,
)
from tests.support import add_roles, add_user, fast_bcrypt, make_session_factory

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


class TestValidateDateRange(unittest.TestCase):
    def test_valid_range(self) -> None:
        validate_date_range(NOW + timedelta(hours=1), NOW + timedelta(days=2), now=NOW)

    def test_end_before_start(self) -> None:
        with self.assertRaises(InvalidDateRangeError):
            validate_date_range(NOW + timedelta(days=2), NOW + timedelta(days=1), now=NOW)

    def test_shorter_than_an_hour(self) -> None:
        start = NOW + timedelta(days=1)
        with self.assertRaises(InvalidDateRangeError):
            validate_date_range(start, start + timedelta(minutes=59), now=NOW)

    def test_start_in_the_past(self) -> None:
        with self.assertRaises(InvalidDateRangeError):
            validate_date_range(NOW - timedelta(hours=1), NOW + timedelta(days=1), now=NOW)

    def test_naive_datetimes_are_utc(self) -> None:
        naive_now = NOW.replace(tzinfo=None)
        validate_date_range(naive_now + timedelta(hours=2), naive_now + timedelta(hours=4), now=NOW)


class TestCalculateTotalPrice(unittest.TestCase):
    def test_started_days_are_charged(self) -> None:
        car = SimpleNamespace(price_group=PriceGroup.ECONOMY.value)
        rate = PriceGroup.ECONOMY.daily_rate
        self.assertEqual(calculate_total_price(car, NOW, NOW + timedelta(hours=2)), rate)
        self.assertEqual(calculate_total_price(car, NOW, NOW + timedelta(days=1)), rate)
        self.assertEqual(calculate_total_price(car, NOW, NOW + timedelta(days=1, hours=1)), rate * 2)


class BookingDbTestCase(unittest.TestCase):
    def setUp(self) -> None:
        patcher = fast_bcrypt()
        patcher.start()
        self.addCleanup(patcher.stop)
        self.db = make_session_factory()()
        self.addCleanup(self.db.close)
        roles = add_roles(self.db)
        self.alice = add_user(self.db, "alice@gmail.com", roles=[roles[RoleName.USER]])
        self.bob = add_user(self.db, "bob@gmail.com", roles=[roles[RoleName.USER]])
        self.admin = add_user(self.db, "admin@gmail.com", roles=[roles[RoleName.ADMIN]])
        self.cars = CarRepository(self.db)
        self.bookings = BookingRepository(self.db)
        self.car = self.cars.save(
            Car(
                make="Toyota",
                model="Corolla",
                year=2022,
                category="Sedan",
                price_group=PriceGroup.STANDARD.value,
                license_plate="CA123456",
            )
        )
        self.start = datetime.now(UTC) + timedelta(days=3)

    def _book(self, user, start_offset_h: int = 0, hours: int = 24):
        start = self.start + timedelta(hours=start_offset_h)
        return create_booking(
            self.bookings, self.cars, user, self.car.uuid, start, start + timedelta(hours=hours)
        )


class TestCreateBooking(BookingDbTestCase):
    def test_creates_confirmed_booking(self) -> None:
        booking = self._book(self.alice, hours=48)
        self.assertEqual(booking.status, BookingStatus.CONFIRMED.value)
        self.assertEqual(booking.total_price, PriceGroup.STANDARD.daily_rate * 2)
        self.assertEqual(booking.user_id, self.alice.id)

    def test_overlapping_booking_rejected(self) -> None:
        self._book(self.alice)
        with self.assertRaises(CarNotAvailableError):
            self._book(self.bob, start_offset_h=12)

    def test_back_to_back_bookings_allowed(self) -> None:
        self._book(self.alice, hours=24)
        self._book(self.bob, start_offset_h=24, hours=24)
        self.assertEqual(len(self.bookings.list_all()), 2)

    def test_cancelled_booking_frees_the_car(self) -> None:
        first = self._book(self.alice)
        cancel_booking(self.bookings, first, self.alice)
        self._book(self.bob, start_offset_h=1)

    def test_unavailable_car_rejected(self) -> None:
        self.car.available = False
        self.cars.save(self.car)
        with self.assertRaises(CarNotAvailableError):
            self._book(self.alice)

    def test_unknown_car(self) -> None:
        with self.assertRaises(ResourceNotFoundError):
            create_booking(
                self.bookings,
                self.cars,
                self.alice,
                uuid.uuid4(),
                self.start,
                self.start + timedelta(days=1),
            )


class TestCancelBooking(BookingDbTestCase):
    def test_owner_cancels(self) -> None:
        booking = cancel_booking(self.bookings, self._book(self.alice), self.alice)
        self.assertEqual(booking.status, BookingStatus.USER_CANCELLED.value)

    def test_other_user_cannot_cancel(self) -> None:
        booking = self._book(self.alice)
        with self.assertRaises(PermissionDeniedError):
            cancel_booking(self.bookings, booking, self.bob)

    def test_admin_cancels_any(self) -> None:
        booking = cancel_booking(self.bookings, self._book(self.alice), self.admin, by_admin=True)
        self.assertEqual(booking.status, BookingStatus.ADMIN_CANCELLED.value)

    def test_cannot_cancel_twice(self) -> None:
        booking = cancel_booking(self.bookings, self._book(self.alice), self.alice)
        with self.assertRaises(BookingStateError):
            cancel_booking(self.bookings, booking, self.alice)


if __name__ == "__main__":
    unittest.main()
