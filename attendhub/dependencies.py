"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from attendhub.config import get_settings
from attendhub.db import DbClient, InMemoryDbClient, PostgresDbClient

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so state persists across requests.

    The backend is chosen once: Postgres when DATABASE_URL is set, otherwise
    the in-memory store.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        logger.info("DATABASE_URL not set; using in-memory storage")
        _db_client = InMemoryDbClient(seed_demo_data=settings.seed_demo_data)
    else:
        logger.info("Using relational storage")
        _db_client = PostgresDbClient(settings.database_url)
    return _db_client


def ensure_schema(db: DbClient) -> None:
    """
    Create tables and seed demo data for relational stores.

    Failures are logged and swallowed so a database that is down at boot
    does not keep the API from starting.
    """
    if not isinstance(db, PostgresDbClient):
        return
    try:
        db.ensure_schema(seed_demo_data=get_settings().seed_demo_data)
    except Exception:
        logger.exception("Schema initialization failed")
