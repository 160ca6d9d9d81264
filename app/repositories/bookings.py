"""Booking persistence and availability queries."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.booking import ACTIVE_BOOKING_STATUSES, Booking


class BookingRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_uuid(self, booking_uuid: uuid.UUID, for_update: bool = False) -> Booking | None:
        stmt = select(Booking).where(Booking.uuid == booking_uuid)
        if for_update:
            stmt = stmt.with_for_update(of=Booking)
        return self.session.scalars(stmt).first()

    def list_for_user(self, user_id: int) -> list[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.user_id == user_id)
            .order_by(Booking.start_date.desc())
        )
        return list(self.session.scalars(stmt))

    def list_all(self) -> list[Booking]:
        return list(self.session.scalars(select(Booking).order_by(Booking.id)))

    def has_overlap(
        self,
        car_id: int,
        start: datetime,
        end: datetime,
        exclude_booking_id: int | None = None,
    ) -> bool:
        """True if an active booking for the car intersects [start, end)."""
        stmt = select(Booking.id).where(
            Booking.car_id == car_id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.start_date < end,
            Booking.end_date > start,
        )
        if exclude_booking_id is not None:
            stmt = stmt.where(Booking.id != exclude_booking_id)
        return self.session.scalars(stmt.limit(1)).first() is not None

    def save(self, booking: Booking) -> Booking:
        self.session.add(booking)
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(booking)
        return booking
