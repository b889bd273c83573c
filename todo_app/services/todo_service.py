"""
TodoService — business façade between the HTTP routes and the active store.

The store only persists what it is given; this layer assigns identifiers to
new todos and checks that a todo exists before mutating it.
"""

from __future__ import annotations

from uuid import uuid4

from fastapi import Request
from structlog import get_logger

from todo_app.database.base import TodoStore
from todo_app.models.schemas import TodoCreate, TodoItem, TodoUpdate

logger = get_logger()


class TodoService:
    """Stateless service layer over a :class:`TodoStore`."""

    def __init__(self, store: TodoStore):
        self._store = store

    async def list_todos(self) -> list[TodoItem]:
        return await self._store.get_items()

    async def get_todo(self, todo_id: str) -> TodoItem | None:
        return await self._store.get_item(todo_id)

    async def create_todo(self, payload: TodoCreate) -> TodoItem:
        """Create a todo with a fresh UUID, not yet completed."""
        item = TodoItem(id=str(uuid4()), name=payload.name, completed=False)
        await self._store.store_item(item)
        logger.info("Todo created", todo_id=item.id)
        return item

    async def update_todo(self, todo_id: str, updates: TodoUpdate) -> TodoItem | None:
        """
        Apply *updates* and return the refreshed todo.

        Returns None without writing when the todo does not exist.
        """
        if await self._store.get_item(todo_id) is None:
            return None

        await self._store.update_item(todo_id, updates)
        return await self._store.get_item(todo_id)

    async def delete_todo(self, todo_id: str) -> bool:
        """Delete a todo; False if it did not exist."""
        if await self._store.get_item(todo_id) is None:
            return False

        await self._store.remove_item(todo_id)
        logger.info("Todo deleted", todo_id=todo_id)
        return True


def get_todo_service(request: Request) -> TodoService:
    """Dependency: service bound to the store the app was created with."""
    return TodoService(request.app.state.store)
