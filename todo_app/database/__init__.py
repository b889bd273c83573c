"""Database module — pluggable async SQL persistence for todo items."""

from .base import StoreConnectionError, StoreError, StoreNotInitializedError, TodoStore
from .engine import SqlAlchemyStore
from .postgres import PostgresStore, wait_for_port
from .selector import get_store, select_store
from .sqlite import SqliteStore

__all__ = [
    "TodoStore",
    "StoreError",
    "StoreNotInitializedError",
    "StoreConnectionError",
    "SqlAlchemyStore",
    "SqliteStore",
    "PostgresStore",
    "wait_for_port",
    "select_store",
    "get_store",
]
