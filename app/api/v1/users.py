"""Signed-in user's own profile and bookings."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.repositories.bookings import BookingRepository
from app.repositories.refresh_tokens import RefreshTokenStore
from app.repositories.users import UserRepository
from app.schemas.booking import BookingResponse
from app.schemas.envelope import ApiResponse, ok
from app.schemas.user import ProfileUpdateRequest, UserResponse
from app.services.users import update_profile

router = APIRouter()


@router.get("/me/profile", response_model=ApiResponse[UserResponse])
def get_profile(current_user: Annotated[User, Depends(get_current_user)]) -> ApiResponse:
    return ok(UserResponse.from_user(current_user))


@router.put("/me/profile", response_model=ApiResponse[UserResponse])
def put_profile(
    body: ProfileUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse:
    """Update names and, with the current password, the password (which signs out other sessions)."""
    user = update_profile(
        UserRepository(db),
        RefreshTokenStore(db),
        current_user,
        first_name=body.first_name,
        last_name=body.last_name,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    return ok(UserResponse.from_user(user))


@router.get("/me/bookings", response_model=ApiResponse[list[BookingResponse]])
def get_my_bookings(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse:
    bookings = BookingRepository(db).list_for_user(current_user.id)
    return ok([BookingResponse.from_booking(b) for b in bookings])
