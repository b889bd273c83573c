"""
Async SQLAlchemy engine and session management shared by the SQL stores.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, ClassVar

from sqlalchemy import URL, MetaData, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.sql.dml import Update
from structlog import get_logger

from todo_app.database.base import StoreNotInitializedError
from todo_app.models.schemas import TodoItem, TodoUpdate

logger = get_logger()


class SqlAlchemyStore(ABC):
    """
    Todo store over an async SQLAlchemy engine.

    Subclasses pick the ORM mapping and implement :meth:`init`; they may
    override :meth:`_encode` / :meth:`_decode_completed` when the backend
    cannot hold ``completed`` as a native boolean. Each operation runs as a
    single statement in its own session.
    """

    backend: ClassVar[str] = "sql"
    model: ClassVar[Any]

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def initialized(self) -> bool:
        return self._session_factory is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    async def init(self) -> None:
        """Open the backend and ensure the table exists."""

    async def _open(self, url: str | URL, **engine_kwargs: Any) -> None:
        """Create the engine (once) and the table if it does not exist."""
        engine = self._engine or create_async_engine(url, **engine_kwargs)
        metadata: MetaData = self.model.metadata

        try:
            async with engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        except Exception:
            if self._engine is None:
                await engine.dispose()
            raise

        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def teardown(self) -> None:
        """Dispose of the engine and release connections."""
        if self._engine is None:
            return

        engine = self._engine
        self._engine = None
        self._session_factory = None
        try:
            await engine.dispose()
        except Exception as exc:
            logger.error("Error closing database connection", backend=self.backend, error=str(exc))
            raise
        logger.info("Database connection closed", backend=self.backend)

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncIterator[AsyncSession]:
        if self._session_factory is None:
            raise StoreNotInitializedError()
        async with self._session_factory() as db:
            try:
                yield db
            except SQLAlchemyError as exc:
                logger.error(
                    "Store operation failed", action=action, backend=self.backend, error=str(exc)
                )
                raise

    # ------------------------------------------------------------------
    # Value conversion
    # ------------------------------------------------------------------

    def _encode(self, field: str, value: Any) -> Any:
        return value

    def _decode_completed(self, value: Any) -> bool:
        return bool(value)

    def _to_schema(self, row: Any) -> TodoItem:
        return TodoItem(
            id=row.id,
            name=row.name,
            completed=self._decode_completed(row.completed),
        )

    def build_update(self, id: str, updates: TodoUpdate) -> Update | None:
        """
        Build the partial ``UPDATE`` for *updates*, or None if nothing was supplied.

        SET columns follow the fixed field order and every value is a bound
        parameter; the id is bound last, in the WHERE clause.
        """
        changes = updates.changes()
        if not changes:
            return None
        values = {field: self._encode(field, value) for field, value in changes.items()}
        return update(self.model).where(self.model.id == id).values(values)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_items(self) -> list[TodoItem]:
        """Return every todo ordered by name."""
        async with self._session("get items") as db:
            result = await db.execute(select(self.model).order_by(self.model.name))
            return [self._to_schema(row) for row in result.scalars().all()]

    async def get_item(self, id: str) -> TodoItem | None:
        """Return the todo with *id*, or *None*."""
        async with self._session("get item") as db:
            result = await db.execute(select(self.model).where(self.model.id == id))
            row = result.scalar_one_or_none()
            if row is None:
                return None
            return self._to_schema(row)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def store_item(self, item: TodoItem) -> None:
        async with self._session("store item") as db:
            await db.execute(
                insert(self.model).values(
                    id=item.id,
                    name=item.name,
                    completed=self._encode("completed", item.completed),
                )
            )
            await db.commit()
            logger.debug("Stored item", backend=self.backend, item=item.model_dump())

    async def update_item(self, id: str, updates: TodoUpdate) -> None:
        stmt = self.build_update(id, updates)
        async with self._session("update item") as db:
            if stmt is None:
                return
            await db.execute(stmt)
            await db.commit()
            logger.debug(
                "Updated item", backend=self.backend, id=id, updates=updates.changes()
            )

    async def remove_item(self, id: str) -> None:
        async with self._session("remove item") as db:
            await db.execute(delete(self.model).where(self.model.id == id))
            await db.commit()
            logger.debug("Removed item", backend=self.backend, id=id)
