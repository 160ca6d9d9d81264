"""Schemas for rentals."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.models.rental import Rental, RentalStatus
from app.schemas.auth import CamelModel


class RentalCreateRequest(CamelModel):
    booking_uuid: UUID


class RentalCompleteRequest(CamelModel):
    fine: float = Field(default=0.0, ge=0, description="Fine charged on return, e.g. for a late return")


class RentalResponse(CamelModel):
    uuid: UUID
    booking_uuid: UUID
    car_uuid: UUID
    user_email: str
    status: RentalStatus
    issued_date: datetime | None = None
    expected_return_date: datetime
    returned_date: datetime | None = None
    issuer_email: str | None = None
    receiver_email: str | None = None
    fine: float = 0.0

    @classmethod
    def from_rental(cls, rental: Rental) -> "RentalResponse":
        return cls(
            uuid=rental.uuid,
            booking_uuid=rental.booking.uuid,
            car_uuid=rental.car.uuid,
            user_email=rental.user.email,
            status=RentalStatus(rental.status),
            issued_date=rental.issued_date,
            expected_return_date=rental.expected_return_date,
            returned_date=rental.returned_date,
            issuer_email=rental.issuer.email if rental.issuer else None,
            receiver_email=rental.receiver.email if rental.receiver else None,
            fine=rental.fine,
        )
