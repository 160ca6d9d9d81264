"""ORM model for car bookings."""

import enum
import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Uuid, func
from sqlalchemy.orm import relationship

from app.models.base import Base


class BookingStatus(str, enum.Enum):
    CONFIRMED = "CONFIRMED"
    USER_CANCELLED = "USER_CANCELLED"
    ADMIN_CANCELLED = "ADMIN_CANCELLED"
    NO_SHOW = "NO_SHOW"
    RENTAL_INITIATED = "RENTAL_INITIATED"


# Statuses that hold the car for the booked period.
ACTIVE_BOOKING_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.RENTAL_INITIATED.value)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(Uuid, nullable=False, unique=True, index=True, default=uuid.uuid4)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    car_id = Column(Integer, ForeignKey("cars.id"), nullable=False, index=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(32), nullable=False, default=BookingStatus.CONFIRMED.value)
    total_price = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    user = relationship("User", lazy="joined")
    car = relationship("Car", lazy="joined")
