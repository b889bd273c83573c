"""
Embedded SQLite store.

The ``aiosqlite`` driver runs each connection on its own worker thread and
serializes calls through a queue, so operations are awaited one at a time.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import URL
from structlog import get_logger

from todo_app.config import get_settings
from todo_app.database.engine import SqlAlchemyStore
from todo_app.database.models import EmbeddedTodoItemModel

logger = get_logger()


class SqliteStore(SqlAlchemyStore):
    """Store backed by a single local SQLite file."""

    backend = "sqlite"
    model = EmbeddedTodoItemModel

    def __init__(
        self,
        location: str | Path | None = None,
        environment: str | None = None,
    ) -> None:
        super().__init__()
        settings = get_settings()
        if location is None:
            location = settings.sqlite.db_location
        self.location = Path(location)
        self.environment = environment or settings.environment

    async def init(self) -> None:
        """Create the parent directory if needed, open the file, ensure the table."""
        self.location.parent.mkdir(parents=True, exist_ok=True)

        url = URL.create("sqlite+aiosqlite", database=str(self.location))
        await self._open(url)

        if self.environment != "test":
            logger.info("Using sqlite database", location=str(self.location))

    # SQLite has no boolean type: completed is stored as 0/1

    def _encode(self, field: str, value: Any) -> Any:
        if field == "completed":
            return 1 if value else 0
        return value

    def _decode_completed(self, value: Any) -> bool:
        return value == 1
