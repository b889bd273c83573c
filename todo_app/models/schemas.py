"""
Data models and schemas for the Todo App.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

NAME_MAX_LENGTH = 255

# Field order is significant: partial updates bind columns in this order.
UPDATABLE_FIELDS: tuple[str, ...] = ("name", "completed")

T = TypeVar("T")


class TodoItem(BaseModel):
    """A single todo record."""

    id: str = Field(description="Opaque unique identifier")
    name: str = Field(
        min_length=1, max_length=NAME_MAX_LENGTH, description="Display text"
    )
    completed: bool = Field(default=False, description="Completion flag")


class TodoCreate(BaseModel):
    """Request body for creating a todo."""

    name: str = Field(
        min_length=1, max_length=NAME_MAX_LENGTH, description="Display text"
    )


class TodoUpdate(BaseModel):
    """
    Partial update for a todo.

    Only fields that were explicitly supplied are applied; see
    :meth:`changes`.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(
        default=None, min_length=1, max_length=NAME_MAX_LENGTH, description="New display text"
    )
    completed: StrictBool | None = Field(default=None, description="New completion flag")

    @field_validator("name", "completed", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field may be omitted but not null")
        return v

    def changes(self) -> dict[str, Any]:
        """Return the supplied fields in column order."""
        supplied = self.model_dump(exclude_unset=True)
        return {field: supplied[field] for field in UPDATABLE_FIELDS if field in supplied}


class FieldError(BaseModel):
    """A single validation failure."""

    field: str = Field(description="Dotted path of the offending field")
    message: str = Field(description="What is wrong with it")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform JSON envelope returned by every endpoint."""

    success: bool = Field(description="Whether the request succeeded")
    data: T | None = Field(default=None, description="Payload")
    error: str | None = Field(default=None, description="Error summary")
    message: str | None = Field(default=None, description="Human readable message")
    errors: list[FieldError] | None = Field(
        default=None, description="Validation failures"
    )
