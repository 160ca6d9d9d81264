"""Rental persistence and lookups."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.rental import OPEN_RENTAL_STATUSES, Rental


class RentalRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_uuid(self, rental_uuid: uuid.UUID, for_update: bool = False) -> Rental | None:
        stmt = select(Rental).where(Rental.uuid == rental_uuid)
        if for_update:
            stmt = stmt.with_for_update(of=Rental)
        return self.session.scalars(stmt).first()

    def find_by_booking(self, booking_id: int) -> Rental | None:
        return self.session.scalars(select(Rental).where(Rental.booking_id == booking_id)).first()

    def find_open_for_user(self, user_id: int) -> Rental | None:
        """The user's pending or active rental, if any."""
        stmt = (
            select(Rental)
            .where(Rental.user_id == user_id, Rental.status.in_(OPEN_RENTAL_STATUSES))
            .order_by(Rental.id.desc())
        )
        return self.session.scalars(stmt.limit(1)).first()

    def list_for_user(self, user_id: int) -> list[Rental]:
        stmt = select(Rental).where(Rental.user_id == user_id).order_by(Rental.id.desc())
        return list(self.session.scalars(stmt))

    def list_all(self, status: str | None = None) -> list[Rental]:
        stmt = select(Rental).order_by(Rental.id)
        if status is not None:
            stmt = stmt.where(Rental.status == status)
        return list(self.session.scalars(stmt))

    def save(self, rental: Rental) -> Rental:
        self.session.add(rental)
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(rental)
        return rental
