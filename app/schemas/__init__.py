"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenRefreshResponse,
)
from app.schemas.booking import BookingCreateRequest, BookingResponse
from app.schemas.car import CarCreateRequest, CarResponse, CarUpdateRequest
from app.schemas.envelope import ApiResponse, FieldError
from app.schemas.health import HealthResponse
from app.schemas.rental import RentalCompleteRequest, RentalCreateRequest, RentalResponse
from app.schemas.user import ProfileUpdateRequest, RolesUpdateRequest, UserResponse

__all__ = [
    "ApiResponse",
    "AuthResponse",
    "BookingCreateRequest",
    "BookingResponse",
    "CarCreateRequest",
    "CarResponse",
    "CarUpdateRequest",
    "FieldError",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "RentalCompleteRequest",
    "RentalCreateRequest",
    "RentalResponse",
    "RolesUpdateRequest",
    "TokenRefreshResponse",
    "UserResponse",
]
