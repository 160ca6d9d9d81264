"""Persistence gateways built per request around a SQLAlchemy Session."""

from app.repositories.bookings import BookingRepository
from app.repositories.cars import CarRepository
from app.repositories.refresh_tokens import RefreshTokenStore
from app.repositories.rentals import RentalRepository
from app.repositories.users import RoleRepository, UserRepository, normalize_email

__all__ = [
    "BookingRepository",
    "CarRepository",
    "RefreshTokenStore",
    "RentalRepository",
    "RoleRepository",
    "UserRepository",
    "normalize_email",
]
