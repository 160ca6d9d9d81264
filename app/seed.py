"""
CLI entrypoint for seeding default roles and users. Safe to re-run:

  python -m app.seed

The API also runs this at startup when SEED_DEFAULT_DATA is enabled.
"""

import logging
import sys

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.logging import configure_logging
from app.core.security import BcryptPasswordHasher
from app.repositories.users import RoleRepository, UserRepository
from app.services.seeding import SeedReport, seed_defaults

logger = logging.getLogger(__name__)


def run_seed(db: Session) -> SeedReport:
    """Seed default data using repositories bound to the given session."""
    return seed_defaults(RoleRepository(db), UserRepository(db), BcryptPasswordHasher())


def main() -> int:
    configure_logging(get_settings().LOG_LEVEL)
    db = SessionLocal()
    try:
        report = run_seed(db)
        if report.failures:
            logger.error("Seeding finished with failures: %s", ", ".join(report.failures))
            return 1
        logger.info("Seeding completed: writes=%s", report.writes)
        return 0
    except Exception as e:
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
