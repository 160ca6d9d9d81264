"""Car persistence."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.car import Car


class CarRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_uuid(
        self,
        car_uuid: uuid.UUID,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> Car | None:
        stmt = select(Car).where(Car.uuid == car_uuid)
        if not include_deleted:
            stmt = stmt.where(Car.deleted.is_(False))
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.scalars(stmt).first()

    def find_by_license_plate(self, license_plate: str) -> Car | None:
        stmt = select(Car).where(Car.license_plate == license_plate)
        return self.session.scalars(stmt).first()

    def list_available(self, price_group: str | None = None) -> list[Car]:
        stmt = select(Car).where(Car.deleted.is_(False), Car.available.is_(True))
        if price_group:
            stmt = stmt.where(Car.price_group == price_group)
        return list(self.session.scalars(stmt.order_by(Car.id)))

    def list_all(self, include_deleted: bool = False) -> list[Car]:
        stmt = select(Car).order_by(Car.id)
        if not include_deleted:
            stmt = stmt.where(Car.deleted.is_(False))
        return list(self.session.scalars(stmt))

    def save(self, car: Car) -> Car:
        self.session.add(car)
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(car)
        return car
