"""User and role persistence."""

from __future__ import annotations

import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.user import Role, RoleName, User


def normalize_email(email: str) -> str:
    return email.strip().lower()


class RoleRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_role_name(self, role_name: RoleName | str) -> Role | None:
        name = role_name.value if isinstance(role_name, RoleName) else role_name
        stmt = select(Role).where(Role.role_name == name)
        return self.session.scalars(stmt).first()

    def list_roles(self) -> list[Role]:
        return list(self.session.scalars(select(Role).order_by(Role.id)))

    def save(self, role: Role) -> Role:
        self.session.add(role)
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(role)
        return role


class UserRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_email(self, email: str) -> User | None:
        """Any user owning the email, soft-deleted ones included."""
        stmt = select(User).where(func.lower(User.email) == normalize_email(email))
        return self.session.scalars(stmt).first()

    def find_active_by_email(self, email: str) -> User | None:
        stmt = select(User).where(
            func.lower(User.email) == normalize_email(email),
            User.deleted.is_(False),
        )
        return self.session.scalars(stmt).first()

    def find_by_uuid(self, user_uuid: uuid.UUID) -> User | None:
        stmt = select(User).where(User.uuid == user_uuid)
        return self.session.scalars(stmt).first()

    def email_exists(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def list_users(self, include_deleted: bool = False) -> list[User]:
        stmt = select(User).order_by(User.id)
        if not include_deleted:
            stmt = stmt.where(User.deleted.is_(False))
        return list(self.session.scalars(stmt))

    def save(self, user: User) -> User:
        """Insert or update the user and commit. Rolls back and re-raises on database errors."""
        if user.email:
            user.email = normalize_email(user.email)
        self.session.add(user)
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(user)
        return user
