"""Health check endpoint with database connectivity check."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import check_db_connected, get_db
from app.schemas.envelope import ApiResponse, ok
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=ApiResponse[HealthResponse])
def get_health(db: Annotated[Session, Depends(get_db)]) -> ApiResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    return ok(
        HealthResponse(
            status="ok",
            environment=get_settings().APP_ENV,
            database=db_status,
        )
    )
