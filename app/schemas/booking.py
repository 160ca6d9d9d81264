"""Schemas for bookings."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.models.booking import Booking, BookingStatus
from app.schemas.auth import CamelModel


class BookingCreateRequest(CamelModel):
    car_uuid: UUID
    start_date: datetime = Field(..., description="Pick-up instant (ISO 8601)")
    end_date: datetime = Field(..., description="Return instant (ISO 8601)")


class BookingResponse(CamelModel):
    uuid: UUID
    car_uuid: UUID
    user_email: str
    start_date: datetime
    end_date: datetime
    status: BookingStatus
    total_price: float

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResponse":
        return cls(
            uuid=booking.uuid,
            car_uuid=booking.car.uuid,
            user_email=booking.user.email,
            start_date=booking.start_date,
            end_date=booking.end_date,
            status=BookingStatus(booking.status),
            total_price=booking.total_price,
        )
