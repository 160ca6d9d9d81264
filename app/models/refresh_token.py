"""ORM model for server-side refresh tokens (one active row per user)."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base


class RefreshToken(Base):
    """
    Opaque refresh token owned by a user.

    The unique user_id column enforces the single-active-token rule at the
    database level; rotation overwrites token and expiry_date in place.
    """

    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    token = Column(String(128), nullable=False, unique=True, index=True)
    expiry_date = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", lazy="joined")
