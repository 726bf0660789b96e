"""Create the database schema and install default forum content."""

import logging

from chetana.db.session import SessionLocal, create_tables
from chetana.services.seed import seed_forum

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables and seeding the forum."""
    create_tables()
    db = SessionLocal()
    try:
        seed_forum(db)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    logger.info("Database initialized.")
