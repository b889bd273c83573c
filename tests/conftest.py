"""Pytest fixtures for todo_app tests."""

import os

os.environ["ENVIRONMENT"] = "test"

import pytest  # noqa: E402

from todo_app.config import get_settings  # noqa: E402
from todo_app.database import SqliteStore  # noqa: E402
from todo_app.database.selector import get_store  # noqa: E402


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from store configuration in the outer environment."""
    for name in list(os.environ):
        if name.startswith(("POSTGRES_", "SQLITE_", "SERVER_")):
            monkeypatch.delenv(name)
    monkeypatch.setenv("ENVIRONMENT", "test")

    get_settings.cache_clear()
    get_store.cache_clear()

    yield

    get_settings.cache_clear()
    get_store.cache_clear()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "todo.db"


@pytest.fixture
async def store(db_path):
    """An initialized SQLite store on a temporary file."""
    sqlite_store = SqliteStore(db_path)
    await sqlite_store.init()
    yield sqlite_store
    await sqlite_store.teardown()
