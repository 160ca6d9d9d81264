"""Refresh Token Store: one active opaque refresh token per user."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import TokenExpiredError, TokenNotFoundError
from app.models.refresh_token import RefreshToken
from app.models.user import User

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on round-trip; stored instants are always UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _tail(token: str) -> str:
    """Last characters of a token, safe for logs."""
    return token[-6:] if token else ""


class RefreshTokenStore:
    """
    Persists refresh tokens keyed by user.

    Writes lock the affected row (SELECT ... FOR UPDATE) and rely on the unique
    constraints on user_id and token, so concurrent logins or refreshes for the
    same user leave exactly one valid token behind.
    """

    def __init__(self, session: Session):
        self.session = session

    def find_by_token(self, token: str) -> RefreshToken | None:
        stmt = select(RefreshToken).where(RefreshToken.token == token)
        return self.session.scalars(stmt).first()

    def find_by_user(self, user: User) -> RefreshToken | None:
        stmt = select(RefreshToken).where(RefreshToken.user_id == user.id)
        return self.session.scalars(stmt).first()

    def save(self, user: User, token: str, expiry: datetime) -> RefreshToken:
        """Upsert the user's token, replacing any previous one."""
        try:
            return self._upsert(user, token, expiry)
        except IntegrityError:
            # Lost an insert race against another login for this user; retry as update.
            self.session.rollback()
            logger.info("Refresh token insert raced for user_id=%s; retrying as update", user.id)
        except SQLAlchemyError:
            self.session.rollback()
            raise
        try:
            return self._upsert(user, token, expiry)
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def _upsert(self, user: User, token: str, expiry: datetime) -> RefreshToken:
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.user_id == user.id)
            .with_for_update(of=RefreshToken)
        )
        row = self.session.scalars(stmt).first()
        if row is None:
            row = RefreshToken(user_id=user.id, token=token, expiry_date=expiry)
            self.session.add(row)
        else:
            row.token = token
            row.expiry_date = expiry
        self.session.commit()
        self.session.refresh(row)
        return row

    def find_valid(self, token: str) -> User:
        """
        Return the owner of a stored, unexpired token.

        Raises TokenNotFoundError if the token is unknown, TokenExpiredError if it
        has expired (the stale row is deleted).
        """
        row = self.find_by_token(token)
        if row is None:
            raise TokenNotFoundError("Refresh token is not recognised. Please sign in again.")
        self._reject_if_expired(row)
        return row.user

    def rotate(self, old_token: str, new_token: str, expiry: datetime) -> User:
        """
        Atomically swap old_token for new_token and return the owner.

        A concurrent rotation of the same old_token blocks on the row lock and
        then finds no matching row, failing with TokenNotFoundError. The swap is
        also conditional on the old value, for databases without row locks.
        """
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.token == old_token)
            .with_for_update(of=RefreshToken)
        )
        row = self.session.scalars(stmt).first()
        if row is None:
            self.session.rollback()
            raise TokenNotFoundError("Refresh token is not recognised. Please sign in again.")
        self._reject_if_expired(row)
        user = row.user
        try:
            swapped = self.session.execute(
                update(RefreshToken)
                .where(RefreshToken.id == row.id, RefreshToken.token == old_token)
                .values(token=new_token, expiry_date=expiry)
                .execution_options(synchronize_session=False)
            )
            if swapped.rowcount != 1:
                self.session.rollback()
                raise TokenNotFoundError("Refresh token is not recognised. Please sign in again.")
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        logger.debug("Rotated refresh token ...%s for user_id=%s", _tail(old_token), user.id)
        return user

    def revoke(self, user: User) -> bool:
        """Delete the user's token. Idempotent; returns whether a row was removed."""
        result = self.session.execute(
            delete(RefreshToken).where(RefreshToken.user_id == user.id)
        )
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return bool(result.rowcount)

    def _reject_if_expired(self, row: RefreshToken) -> None:
        if _as_utc(row.expiry_date) > datetime.now(UTC):
            return
        user_id = row.user_id
        self.session.delete(row)
        self.session.commit()
        logger.info("Deleted expired refresh token for user_id=%s", user_id)
        raise TokenExpiredError("Refresh token has expired. Please sign in again.")
