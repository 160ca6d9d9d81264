"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.booking import Booking, BookingStatus
from app.models.car import Car, PriceGroup
from app.models.refresh_token import RefreshToken
from app.models.rental import Rental, RentalStatus
from app.models.user import AuthProvider, Role, RoleName, User, user_roles

__all__ = [
    "AuthProvider",
    "Base",
    "Booking",
    "BookingStatus",
    "Car",
    "PriceGroup",
    "RefreshToken",
    "Rental",
    "RentalStatus",
    "Role",
    "RoleName",
    "User",
    "user_roles",
]
