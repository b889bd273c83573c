"""API module."""

from .todo import router as todo_router

__all__ = ["todo_router"]
