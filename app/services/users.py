"""Profile updates and administrative user management."""

import logging
import uuid

from app.core.exceptions import (
    AuthenticationFailedError,
    PermissionDeniedError,
    ResourceNotFoundError,
)
from app.core.security import BcryptPasswordHasher
from app.models.user import RoleName, User
from app.repositories.refresh_tokens import RefreshTokenStore
from app.repositories.users import RoleRepository, UserRepository

logger = logging.getLogger(__name__)


def get_user_or_404(users: UserRepository, user_uuid: uuid.UUID) -> User:
    user = users.find_by_uuid(user_uuid)
    if user is None:
        raise ResourceNotFoundError(f"User {user_uuid} not found.")
    return user


def update_profile(
    users: UserRepository,
    refresh_tokens: RefreshTokenStore,
    user: User,
    first_name: str | None = None,
    last_name: str | None = None,
    current_password: str | None = None,
    new_password: str | None = None,
    hasher: BcryptPasswordHasher | None = None,
) -> User:
    """
    Apply profile changes for the signed-in user.

    Changing the password requires the current one, except for federated
    accounts that have never had a local password. A changed password revokes
    the refresh token, so other sessions end when their access token expires.
    """
    hasher = hasher or BcryptPasswordHasher()
    if first_name is not None:
        user.first_name = first_name.strip()
    if last_name is not None:
        user.last_name = last_name.strip()
    if new_password is not None:
        if user.password_hash and not hasher.matches(current_password or "", user.password_hash):
            raise AuthenticationFailedError("Current password is incorrect.", field="currentPassword")
        user.password_hash = hasher.encode(new_password)
    user = users.save(user)
    if new_password is not None:
        refresh_tokens.revoke(user)
        logger.info("Password changed for user_id=%s (provider=%s)", user.id, user.auth_provider)
    return user


def soft_delete_user(
    users: UserRepository,
    refresh_tokens: RefreshTokenStore,
    target: User,
    actor: User,
) -> User:
    """Mark the user deleted and revoke their refresh token. Admins cannot delete themselves."""
    if target.id == actor.id:
        raise PermissionDeniedError("You cannot delete your own account.")
    if target.deleted:
        return target
    target.deleted = True
    target = users.save(target)
    refresh_tokens.revoke(target)
    logger.info("User_id=%s soft-deleted by user_id=%s", target.id, actor.id)
    return target


def restore_user(users: UserRepository, target: User, actor: User) -> User:
    if not target.deleted:
        return target
    target.deleted = False
    target = users.save(target)
    logger.info("User_id=%s restored by user_id=%s", target.id, actor.id)
    return target


def set_user_roles(
    users: UserRepository,
    roles: RoleRepository,
    target: User,
    role_names: list[RoleName],
) -> User:
    """Replace the user's roles. Every named role must already exist."""
    resolved = []
    for role_name in role_names:
        role = roles.find_by_role_name(role_name)
        if role is None:
            raise ResourceNotFoundError(f"Role {role_name.value} not found.", field="role")
        resolved.append(role)
    target.roles = resolved
    target = users.save(target)
    logger.info(
        "Roles for user_id=%s set to %s", target.id, [r.value for r in role_names]
    )
    return target
