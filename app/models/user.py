"""ORM models for users, roles and the user/role association."""

import enum
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship

from app.models.base import Base


class RoleName(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    SUPERADMIN = "SUPERADMIN"


class AuthProvider(str, enum.Enum):
    LOCAL = "LOCAL"
    GOOGLE = "GOOGLE"


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """Authorization role; one row per RoleName."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_name = Column(String(30), nullable=False, unique=True, index=True)

    def __repr__(self) -> str:
        return f"Role(id={self.id!r}, role_name={self.role_name!r})"


class User(Base):
    """
    Account used for login, profile and bookings.

    email is the login identifier and is unique across all rows, soft-deleted
    ones included. password_hash is null for users created through Google login.
    Roles load eagerly and keep role id order.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(Uuid, nullable=False, unique=True, index=True, default=uuid.uuid4)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=True)
    auth_provider = Column(String(20), nullable=False, default=AuthProvider.LOCAL.value)
    google_id = Column(String(255), nullable=True)
    deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    roles = relationship(
        "Role",
        secondary=user_roles,
        lazy="selectin",
        order_by="Role.id",
    )

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email!r}, deleted={self.deleted!r})"
