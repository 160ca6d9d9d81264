"""Default data: roles USER/ADMIN/SUPERADMIN and one sample user per role. Idempotent."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.security import roles_to_authority_strings
from app.models.user import AuthProvider, Role, RoleName, User

if TYPE_CHECKING:
    from app.core.security import BcryptPasswordHasher
    from app.repositories.users import RoleRepository, UserRepository

logger = logging.getLogger(__name__)

# Processed in this order; a failure for one role does not stop the others.
DEFAULT_ROLES = (RoleName.USER, RoleName.ADMIN, RoleName.SUPERADMIN)

DEFAULT_EMAIL_DOMAIN = "gmail.com"


@dataclass(frozen=True)
class DefaultAccount:
    email: str
    first_name: str
    last_name: str
    password: str


@dataclass
class SeedReport:
    roles_created: int = 0
    users_created: int = 0
    users_updated: int = 0
    failures: list[str] = field(default_factory=list)

    @property
    def writes(self) -> int:
        return self.roles_created + self.users_created + self.users_updated


def default_account(role_name: RoleName) -> DefaultAccount:
    """
    Deterministic default account for a role, e.g. user@gmail.com / userpassword.

    The placeholder password is meant to be rotated in real deployments.
    """
    name = role_name.value.lower()
    return DefaultAccount(
        email=f"{name}@{DEFAULT_EMAIL_DOMAIN}",
        first_name=f"Default-{name}-user",
        last_name="User",
        password=f"{name}password",
    )


def seed_defaults(
    role_repository: RoleRepository,
    user_repository: UserRepository,
    password_hasher: BcryptPasswordHasher,
) -> SeedReport:
    """
    Ensure each default role exists and has an active default user holding it.

    Existing soft-deleted default users are reactivated and given their role
    in a single save. Nothing is written when the data is already in place.
    """
    report = SeedReport()
    logger.info("Seeding default roles and users")
    for role_name in DEFAULT_ROLES:
        role = _ensure_role(role_repository, role_name, report)
        if role is None:
            continue
        _ensure_default_user(user_repository, password_hasher, role, role_name, report)
    logger.info(
        "Seeding complete: roles_created=%s users_created=%s users_updated=%s failures=%s",
        report.roles_created,
        report.users_created,
        report.users_updated,
        len(report.failures),
    )
    return report


def _ensure_role(
    role_repository: RoleRepository, role_name: RoleName, report: SeedReport
) -> Role | None:
    role = role_repository.find_by_role_name(role_name)
    if role is not None:
        logger.debug("Role %s already exists (id=%s)", role_name.value, role.id)
        return role

    logger.info("Role %s not found; creating", role_name.value)
    try:
        role = role_repository.save(Role(role_name=role_name.value))
    except IntegrityError:
        # Another process created it between the lookup and the insert.
        role = role_repository.find_by_role_name(role_name)
        if role is not None:
            return role
        logger.error("Role %s could not be created or re-read", role_name.value)
        report.failures.append(f"role:{role_name.value}")
        return None
    except SQLAlchemyError:
        logger.exception("Failed to save role %s; skipping its default user", role_name.value)
        report.failures.append(f"role:{role_name.value}")
        return None

    if role is None or role.id is None:
        logger.error("Role %s was not persisted; skipping its default user", role_name.value)
        report.failures.append(f"role:{role_name.value}")
        return None
    report.roles_created += 1
    logger.info("Created role %s (id=%s)", role_name.value, role.id)
    return role


def _ensure_default_user(
    user_repository: UserRepository,
    password_hasher: BcryptPasswordHasher,
    role: Role,
    role_name: RoleName,
    report: SeedReport,
) -> None:
    account = default_account(role_name)
    existing = user_repository.find_by_email(account.email)

    if existing is not None:
        needs_save = False
        if existing.deleted:
            logger.info("Reactivating soft-deleted default user %s", account.email)
            existing.deleted = False
            needs_save = True
        if role.role_name not in roles_to_authority_strings(existing.roles):
            logger.info("Default user %s is missing role %s; adding", account.email, role.role_name)
            existing.roles.append(role)
            needs_save = True
        if needs_save:
            try:
                user_repository.save(existing)
            except SQLAlchemyError:
                logger.exception("Failed to update default user %s", account.email)
                report.failures.append(f"user:{account.email}")
                return
            report.users_updated += 1
        return

    logger.info("Default user %s not found; creating with role %s", account.email, role.role_name)
    user = User(
        first_name=account.first_name,
        last_name=account.last_name,
        email=account.email,
        password_hash=password_hasher.encode(account.password),
        auth_provider=AuthProvider.LOCAL.value,
        deleted=False,
        roles=[role],
    )
    try:
        created = user_repository.save(user)
    except Exception:
        logger.exception(
            "Error creating default user for role %s with email %s", role_name.value, account.email
        )
        report.failures.append(f"user:{account.email}")
        return
    report.users_created += 1
    logger.info("Created default user %s (id=%s)", account.email, created.id)
