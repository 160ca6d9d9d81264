"""Shared fixtures: SQLite databases with the default roles."""

from collections.abc import Generator
from unittest.mock import patch

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import hash_password
from app.models import Base, Role, RoleName, User


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database; every session shares the one connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_file_session_factory(path: str) -> sessionmaker:
    """
    File-backed SQLite whose transactions start with BEGIN IMMEDIATE.

    Sessions on separate threads get separate connections and serialize on the
    write lock, so concurrent writers behave as they would under row locks.
    """
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False, "timeout": 15},
    )

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, _record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def fast_bcrypt():
    """Patch bcrypt cost down for tests; use as a context manager or in setUp."""
    return patch("app.core.security.BCRYPT_ROUNDS", 4)


def add_roles(db: Session) -> dict[RoleName, Role]:
    roles = {name: Role(role_name=name.value) for name in RoleName}
    db.add_all(roles.values())
    db.commit()
    return roles


def add_user(
    db: Session,
    email: str,
    password: str | None = "password123",
    roles: list[Role] | None = None,
    deleted: bool = False,
) -> User:
    user = User(
        first_name="Test",
        last_name="User",
        email=email,
        password_hash=hash_password(password) if password else None,
        deleted=deleted,
        roles=roles or [],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def override_get_db(factory: sessionmaker):
    def _get_db() -> Generator[Session, None, None]:
        db = factory()
        try:
            yield db
        finally:
            db.close()

    return _get_db
