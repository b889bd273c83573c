"""
SQLAlchemy ORM models for the todo table.

Both backends persist the same ``todo_items`` table, but SQLite has no native
boolean type, so each backend gets its own declarative base and mapping.
"""

from sqlalchemy import Boolean, Integer, String, false, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

TABLE_NAME = "todo_items"


class Base(DeclarativeBase):
    """Declarative base for the PostgreSQL schema."""
    pass


class EmbeddedBase(DeclarativeBase):
    """Declarative base for the SQLite schema."""
    pass


class TodoItemModel(Base):
    """Todo row with a native boolean ``completed`` column."""

    __tablename__ = TABLE_NAME

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    def __repr__(self) -> str:
        return f"<TodoItem {self.id} name={self.name!r} completed={self.completed}>"


class EmbeddedTodoItemModel(EmbeddedBase):
    """Todo row storing ``completed`` as 0/1."""

    __tablename__ = TABLE_NAME

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    completed: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )

    def __repr__(self) -> str:
        return f"<TodoItem {self.id} name={self.name!r} completed={self.completed}>"
