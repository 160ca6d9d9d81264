"""Register/login/refresh/logout routes and auth dependencies (get_current_user, require_roles)."""

import uuid
from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.exceptions import PermissionDeniedError, TokenNotFoundError
from app.core.security import decode_access_token, roles_to_authority_strings
from app.models.user import RoleName, User
from app.repositories.refresh_tokens import RefreshTokenStore
from app.repositories.users import RoleRepository, UserRepository
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenRefreshResponse,
)
from app.schemas.envelope import ApiResponse, ok
from app.services.sessions import AuthResult, SessionService

router = APIRouter()
security = HTTPBearer(auto_error=False)

ADMIN_ROLES = (RoleName.ADMIN, RoleName.SUPERADMIN)


def get_session_service(db: Annotated[Session, Depends(get_db)]) -> SessionService:
    return SessionService(UserRepository(db), RoleRepository(db), RefreshTokenStore(db))


def set_refresh_cookie(response: Response, token: str) -> None:
    """Deliver the refresh token as an HTTP-only cookie scoped to the auth routes."""
    settings = get_settings()
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        path=settings.REFRESH_COOKIE_PATH,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def clear_refresh_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        path=settings.REFRESH_COOKIE_PATH,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def to_auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        access_token=result.access_token,
        access_token_expires_in=result.access_token_expires_in,
        email=result.user.email,
        roles=result.roles,
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str, db: Session) -> User:
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    try:
        user_uuid = uuid.UUID(str(payload.get("sub")))
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token payload")
    user = UserRepository(db).find_by_uuid(user_uuid)
    if user is None or user.deleted:
        raise _unauthorized("User not found")
    return user


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Dependency: require a valid Bearer JWT and return the active user. Raises 401 otherwise."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    return _user_from_token(credentials.credentials, db)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """Dependency: the user behind a valid Bearer JWT, or None when absent or invalid."""
    if credentials is None:
        return None
    try:
        return _user_from_token(credentials.credentials, db)
    except HTTPException:
        return None


def require_roles(*allowed: RoleName) -> Callable[..., User]:
    """Dependency factory: require the current user to hold at least one of the roles."""
    allowed_names = {r.value for r in allowed}

    def dependency(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        if not allowed_names.intersection(roles_to_authority_strings(current_user.roles)):
            raise PermissionDeniedError(
                "Access denied. You do not have permission to perform this action."
            )
        return current_user

    return dependency


require_admin = require_roles(*ADMIN_ROLES)
require_superadmin = require_roles(RoleName.SUPERADMIN)


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
)
def register(
    body: RegisterRequest,
    response: Response,
    service: Annotated[SessionService, Depends(get_session_service)],
) -> ApiResponse:
    """Create a local account with role USER and sign it in."""
    result = service.register(body.first_name, body.last_name, body.email, body.password)
    set_refresh_cookie(response, result.refresh_token)
    return ok(to_auth_response(result))


@router.post("/login", response_model=ApiResponse[AuthResponse])
def login(
    body: LoginRequest,
    response: Response,
    service: Annotated[SessionService, Depends(get_session_service)],
) -> ApiResponse:
    """
    Authenticate with email and password.

    The access token is returned in the body; send it as
    Authorization: Bearer <accessToken>. The refresh token is set as an
    HTTP-only cookie and is only sent to the /auth routes.
    """
    result = service.login(body.email, body.password)
    set_refresh_cookie(response, result.refresh_token)
    return ok(to_auth_response(result))


@router.post("/refresh", response_model=ApiResponse[TokenRefreshResponse])
def refresh(
    request: Request,
    response: Response,
    service: Annotated[SessionService, Depends(get_session_service)],
) -> ApiResponse:
    """Exchange the refresh-token cookie for a new access token; the cookie is rotated."""
    token = request.cookies.get(get_settings().REFRESH_COOKIE_NAME)
    if not token:
        raise TokenNotFoundError("Refresh token cookie is missing.")
    result = service.refresh(token)
    set_refresh_cookie(response, result.refresh_token)
    return ok(
        TokenRefreshResponse(
            access_token=result.access_token,
            access_token_expires_in=result.access_token_expires_in,
        )
    )


@router.post("/logout", response_model=ApiResponse[MessageResponse])
def logout(
    request: Request,
    response: Response,
    service: Annotated[SessionService, Depends(get_session_service)],
    current_user: Annotated[User | None, Depends(get_optional_user)],
) -> ApiResponse:
    """Revoke the refresh token and clear its cookie. Safe to call repeatedly."""
    if current_user is not None:
        service.logout(current_user)
    else:
        token = request.cookies.get(get_settings().REFRESH_COOKIE_NAME)
        if token:
            service.logout_by_refresh_token(token)
    clear_refresh_cookie(response)
    return ok(MessageResponse(message="Logged out."))
