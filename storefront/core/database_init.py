"""Database initialization module.

Creates any missing tables on startup. Schema changes after the first deploy
go through the Alembic revisions in ``alembic/versions``.
"""

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from storefront.models import Base

logger = logging.getLogger(__name__)


def init_database_schema(engine: Engine) -> None:
    """Create the products, categories and users tables if they don't exist.

    Raises:
        SQLAlchemyError: If the database cannot be reached
    """
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as exc:
        logger.error("Failed to initialize database schema: %s", exc)
        raise
    logger.info("Database schema initialized")
