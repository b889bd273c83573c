"""Record store protocol and error taxonomy."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from todo_app.models.schemas import TodoItem, TodoUpdate


class StoreError(Exception):
    """Base class for errors raised by the store layer itself."""


class StoreNotInitializedError(StoreError, RuntimeError):
    """A data operation was invoked before ``init()`` succeeded."""

    def __init__(self, message: str = "Database not initialized") -> None:
        super().__init__(message)


class StoreConnectionError(StoreError, ConnectionError):
    """The backend could not be reached within the startup wait."""


@runtime_checkable
class TodoStore(Protocol):
    """Protocol for todo persistence backends.

    Every operation is a coroutine. Data operations raise
    :class:`StoreNotInitializedError` until :meth:`init` has completed.
    """

    async def init(self) -> None:
        """Connect and ensure the ``todo_items`` table exists (idempotent)."""
        ...

    async def teardown(self) -> None:
        """Release the connection; a no-op if never initialized."""
        ...

    async def get_items(self) -> list[TodoItem]:
        """All records ordered by name."""
        ...

    async def get_item(self, id: str) -> TodoItem | None:
        """Single record by id, or None."""
        ...

    async def store_item(self, item: TodoItem) -> None:
        """Insert a new record; duplicate ids raise."""
        ...

    async def update_item(self, id: str, updates: TodoUpdate) -> None:
        """Apply the supplied fields; unknown ids are ignored."""
        ...

    async def remove_item(self, id: str) -> None:
        """Delete a record; unknown ids are ignored."""
        ...
