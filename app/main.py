"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.api.errors import register_exception_handlers
from app.api.v1 import router as v1_router
from app.core.config import settings
from app.core.database import SessionLocal, engine
from app.core.logging import configure_logging
from app.models import Base
from app.seed import run_seed

logger = logging.getLogger(__name__)


def seed_on_startup() -> None:
    """Seed default roles and users; a database failure is logged and startup continues."""
    db = SessionLocal()
    try:
        report = run_seed(db)
        if report.failures:
            logger.warning("Default data seeding had failures: %s", ", ".join(report.failures))
    except SQLAlchemyError:
        logger.exception("Default data seeding failed; continuing without it")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.LOG_LEVEL)
    if settings.DB_CREATE_ALL:
        logger.info("Creating missing database tables")
        Base.metadata.create_all(bind=engine)
    if settings.SEED_DEFAULT_DATA:
        seed_on_startup()
    yield


app = FastAPI(
    title="OnTheGoRentals API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Credentials (the refresh cookie) require explicit origins.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "OnTheGoRentals API"}
