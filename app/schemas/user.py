"""Schemas for user profiles and admin user management."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, roles_to_authority_strings
from app.models.user import RoleName, User
from app.schemas.auth import CamelModel


class UserResponse(CamelModel):
    """Public view of a user (no password hash, no internal id)."""

    uuid: UUID
    email: str
    first_name: str | None = None
    last_name: str | None = None
    roles: list[str]
    auth_provider: str
    deleted: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            uuid=user.uuid,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            roles=roles_to_authority_strings(user.roles),
            auth_provider=user.auth_provider,
            deleted=user.deleted,
            created_at=user.created_at,
        )


class ProfileUpdateRequest(CamelModel):
    """Fields a user may change on their own profile. Omitted fields are left as is."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    current_password: str | None = Field(default=None, max_length=PASSWORD_MAX_LEN)
    new_password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )


class RolesUpdateRequest(CamelModel):
    roles: list[RoleName] = Field(..., min_length=1)

    @field_validator("roles")
    @classmethod
    def dedupe_roles(cls, v: list[RoleName]) -> list[RoleName]:
        return list(dict.fromkeys(v))
