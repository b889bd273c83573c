"""Tests for process-wide store selection."""

from pathlib import Path

from todo_app.config import Settings
from todo_app.database import PostgresStore, SqliteStore, get_store, select_store


class TestSelectStore:
    def test_defaults_to_sqlite(self):
        store = select_store(Settings())

        assert isinstance(store, SqliteStore)
        assert store.location == Path("/tmp/todo.db")

    def test_sqlite_location_from_env(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("SQLITE_DB_LOCATION", str(tmp_path / "data" / "todo.db"))

        store = select_store(Settings())

        assert store.location == tmp_path / "data" / "todo.db"

    def test_postgres_host_selects_postgres(self, monkeypatch):
        monkeypatch.setenv("POSTGRES_HOST", "db")

        store = select_store(Settings())

        assert isinstance(store, PostgresStore)
        assert store.config.host == "db"

    def test_postgres_host_file_selects_postgres(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("POSTGRES_HOST_FILE", str(tmp_path / "host"))

        assert isinstance(select_store(Settings()), PostgresStore)

    def test_selection_does_not_connect(self, monkeypatch):
        monkeypatch.setenv("POSTGRES_HOST", "db")

        assert not select_store(Settings()).initialized

    def test_sqlite_gets_configured_environment(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")

        store = select_store(Settings())

        assert store.environment == "production"


class TestGetStore:
    def test_cached_for_process(self):
        assert get_store() is get_store()

    def test_not_reevaluated_after_env_change(self, monkeypatch):
        first = get_store()
        monkeypatch.setenv("POSTGRES_HOST", "db")

        assert get_store() is first
        assert isinstance(first, SqliteStore)
