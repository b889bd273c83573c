"""Services module."""

from .todo_service import TodoService, get_todo_service

__all__ = ["TodoService", "get_todo_service"]
