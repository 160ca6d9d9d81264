"""ORM model for rentals: a confirmed booking once the customer takes the car."""

import enum
import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Uuid, func
from sqlalchemy.orm import relationship

from app.models.base import Base


class RentalStatus(str, enum.Enum):
    PENDING_CONFIRMATION = "PENDING_CONFIRMATION"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Statuses in which the customer holds (or is about to hold) the car.
OPEN_RENTAL_STATUSES = (RentalStatus.PENDING_CONFIRMATION.value, RentalStatus.ACTIVE.value)


class Rental(Base):
    """
    Rental created from a CONFIRMED booking.

    issuer_id and receiver_id are the admins who handed the car over and took
    it back; both stay NULL until that step happens.
    """

    __tablename__ = "rentals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(Uuid, nullable=False, unique=True, index=True, default=uuid.uuid4)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    car_id = Column(Integer, ForeignKey("cars.id"), nullable=False, index=True)
    issuer_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    status = Column(String(32), nullable=False, default=RentalStatus.PENDING_CONFIRMATION.value)
    issued_date = Column(DateTime(timezone=True), nullable=True)
    expected_return_date = Column(DateTime(timezone=True), nullable=False)
    returned_date = Column(DateTime(timezone=True), nullable=True)
    fine = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    booking = relationship("Booking", lazy="joined")
    user = relationship("User", lazy="joined", foreign_keys=[user_id])
    car = relationship("Car", lazy="joined")
    issuer = relationship("User", lazy="joined", foreign_keys=[issuer_id])
    receiver = relationship("User", lazy="joined", foreign_keys=[receiver_id])
