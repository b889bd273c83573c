"""Tests for the project metadata in pyproject.toml."""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


@pytest.fixture(scope="module")
def project():
    with PYPROJECT.open("rb") as f:
        return tomllib.load(f)["project"]


class TestProjectMetadata:
    def test_readme_is_not_a_design_document(self, project):
        assert project.get("readme") not in {"SPEC_FULL.md", "DESIGN.md"}

    def test_console_script(self, project):
        assert project["scripts"]["todo-server"] == "todo_app.main:main"

    def test_drivers_declared(self, project):
        names = {dep.split("[")[0].split(">")[0] for dep in project["dependencies"]}

        assert {"asyncpg", "aiosqlite", "structlog", "fastapi"} <= names
