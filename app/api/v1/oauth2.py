"""Google sign-in: redirect to the provider, then exchange the callback for local tokens."""

import logging
import secrets
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.api.v1.auth import get_session_service, set_refresh_cookie
from app.core.config import get_settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationFailedError
from app.repositories.users import RoleRepository, UserRepository
from app.services.oauth2 import GoogleOAuth2Client, OAuth2Bridge
from app.services.sessions import SessionService

logger = logging.getLogger(__name__)

router = APIRouter()

STATE_COOKIE_NAME = "oauth2_state"
STATE_COOKIE_MAX_AGE = 10 * 60


def get_google_client() -> GoogleOAuth2Client:
    return GoogleOAuth2Client(get_settings())


def get_oauth2_bridge(
    db: Annotated[Session, Depends(get_db)],
    sessions: Annotated[SessionService, Depends(get_session_service)],
) -> OAuth2Bridge:
    return OAuth2Bridge(UserRepository(db), RoleRepository(db), sessions)


@router.get("/authorization/google")
def start_google_login(
    client: Annotated[GoogleOAuth2Client, Depends(get_google_client)],
) -> RedirectResponse:
    """Redirect the browser to Google's consent screen."""
    settings = get_settings()
    state = secrets.token_urlsafe(24)
    response = RedirectResponse(client.authorization_url(state), status_code=302)
    response.set_cookie(
        key=STATE_COOKIE_NAME,
        value=state,
        max_age=STATE_COOKIE_MAX_AGE,
        path=f"{settings.API_V1_PREFIX}/oauth2",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.get("/callback/google")
def google_callback(
    request: Request,
    client: Annotated[GoogleOAuth2Client, Depends(get_google_client)],
    bridge: Annotated[OAuth2Bridge, Depends(get_oauth2_bridge)],
    code: Annotated[str, Query(min_length=1)],
    state: Annotated[str, Query(min_length=1)],
) -> RedirectResponse:
    """
    Complete Google sign-in.

    The local user is looked up or created, tokens are issued and the browser
    is sent to {FRONTEND_URL}/oauth2/redirect?token=<accessToken>. The refresh
    token is set as a cookie exactly as for password login.
    """
    settings = get_settings()
    expected = request.cookies.get(STATE_COOKIE_NAME)
    if not expected or not secrets.compare_digest(expected, state):
        logger.warning("OAuth2 callback rejected: state mismatch")
        raise AuthenticationFailedError("OAuth2 state mismatch. Please try signing in again.")

    identity = client.fetch_identity(code)
    result = bridge.login(identity)
    logger.info("OAuth2 sign-in succeeded for user_id=%s", result.user.id)

    target = f"{settings.FRONTEND_URL}/oauth2/redirect?{urlencode({'token': result.access_token})}"
    response = RedirectResponse(target, status_code=302)
    set_refresh_cookie(response, result.refresh_token)
    response.delete_cookie(STATE_COOKIE_NAME, path=f"{settings.API_V1_PREFIX}/oauth2")
    return response
