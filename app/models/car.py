"""ORM model for rentable cars."""

import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Uuid, func

from app.models.base import Base


class PriceGroup(str, enum.Enum):
    ECONOMY = "ECONOMY"
    STANDARD = "STANDARD"
    LUXURY = "LUXURY"
    PREMIUM = "PREMIUM"
    EXOTIC = "EXOTIC"
    SPECIAL = "SPECIAL"
    OTHER = "OTHER"
    NONE = "NONE"

    @property
    def daily_rate(self) -> float:
        return DAILY_RATES[self]


# Rental price per started day, by price group.
DAILY_RATES = {
    PriceGroup.ECONOMY: 550.00,
    PriceGroup.STANDARD: 650.00,
    PriceGroup.LUXURY: 800.00,
    PriceGroup.PREMIUM: 3000.00,
    PriceGroup.EXOTIC: 20000.00,
    PriceGroup.SPECIAL: 450.00,
    PriceGroup.OTHER: 700.00,
    PriceGroup.NONE: 0.00,
}


class Car(Base):
    """Fleet vehicle. Soft-deleted cars are hidden from listings and cannot be booked."""

    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(Uuid, nullable=False, unique=True, index=True, default=uuid.uuid4)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    category = Column(String(50), nullable=False, default="")
    price_group = Column(String(20), nullable=False, default=PriceGroup.STANDARD.value)
    license_plate = Column(String(20), nullable=False, unique=True)
    available = Column(Boolean, nullable=False, default=True)
    deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
