"""Public fleet listing."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.car import PriceGroup
from app.repositories.cars import CarRepository
from app.schemas.car import CarResponse
from app.schemas.envelope import ApiResponse, ok
from app.services.cars import get_car_or_404

router = APIRouter()


@router.get("", response_model=ApiResponse[list[CarResponse]])
def list_available_cars(
    db: Annotated[Session, Depends(get_db)],
    price_group: Annotated[PriceGroup | None, Query(alias="priceGroup")] = None,
) -> ApiResponse:
    """Cars that are available for booking, optionally filtered by price group."""
    cars = CarRepository(db).list_available(price_group.value if price_group else None)
    return ok([CarResponse.from_car(c) for c in cars])


@router.get("/{car_uuid}", response_model=ApiResponse[CarResponse])
def get_car(car_uuid: uuid.UUID, db: Annotated[Session, Depends(get_db)]) -> ApiResponse:
    return ok(CarResponse.from_car(get_car_or_404(CarRepository(db), car_uuid)))
