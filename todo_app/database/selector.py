"""
Process-wide store selection.

The backend is chosen once from configuration: a configured PostgreSQL host
selects the networked store, anything else the embedded SQLite store.
"""

from functools import lru_cache

from structlog import get_logger

from todo_app.config import Settings, get_settings
from todo_app.database.base import TodoStore
from todo_app.database.postgres import PostgresStore
from todo_app.database.sqlite import SqliteStore

logger = get_logger()


def select_store(settings: Settings) -> TodoStore:
    """Build the store implementation that *settings* call for."""
    if settings.postgres.is_configured:
        logger.debug("Selected store", backend=PostgresStore.backend)
        return PostgresStore(settings.postgres)

    logger.debug("Selected store", backend=SqliteStore.backend)
    return SqliteStore(settings.sqlite.db_location, environment=settings.environment)


@lru_cache
def get_store() -> TodoStore:
    """Get the cached process-wide store (not yet initialized)."""
    return select_store(get_settings())
