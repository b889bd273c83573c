"""
Todo REST API routes.

Every response uses the ``ApiResponse`` envelope. Input validation happens
here, before anything reaches the store.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path

from todo_app.models.schemas import ApiResponse, TodoCreate, TodoItem, TodoUpdate
from todo_app.services.todo_service import TodoService, get_todo_service

router = APIRouter(prefix="/todos", tags=["todos"])

UUID_PATTERN = (
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

TodoId = Annotated[str, Path(pattern=UUID_PATTERN, description="Todo UUID")]
Service = Annotated[TodoService, Depends(get_todo_service)]

_NOT_FOUND = {404: {"model": ApiResponse[None], "description": "Todo not found"}}
_INVALID = {400: {"model": ApiResponse[None], "description": "Invalid input"}}


@router.get(
    "",
    response_model=ApiResponse[list[TodoItem]],
    response_model_exclude_none=True,
    summary="List todos",
    description="Get all todos ordered by name",
)
@router.get("/", response_model_exclude_none=True, include_in_schema=False)
async def list_todos(service: Service) -> ApiResponse[list[TodoItem]]:
    items = await service.list_todos()
    return ApiResponse[list[TodoItem]](success=True, data=items)


@router.get(
    "/{todo_id}",
    response_model=ApiResponse[TodoItem],
    response_model_exclude_none=True,
    responses={**_INVALID, **_NOT_FOUND},
    summary="Get a todo",
)
async def get_todo(todo_id: TodoId, service: Service) -> ApiResponse[TodoItem]:
    item = await service.get_todo(todo_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Todo not found")
    return ApiResponse[TodoItem](success=True, data=item)


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[TodoItem],
    response_model_exclude_none=True,
    responses=_INVALID,
    summary="Create a todo",
)
@router.post(
    "/", status_code=201, response_model_exclude_none=True, include_in_schema=False
)
async def create_todo(payload: TodoCreate, service: Service) -> ApiResponse[TodoItem]:
    """New todos get a generated id and start out not completed."""
    item = await service.create_todo(payload)
    return ApiResponse[TodoItem](
        success=True, data=item, message="Todo created successfully"
    )


@router.put(
    "/{todo_id}",
    response_model=ApiResponse[TodoItem],
    response_model_exclude_none=True,
    responses={**_INVALID, **_NOT_FOUND},
    summary="Update a todo",
    description="Apply a partial update; omitted fields keep their values",
)
async def update_todo(
    todo_id: TodoId,
    updates: TodoUpdate,
    service: Service,
) -> ApiResponse[TodoItem]:
    item = await service.update_todo(todo_id, updates)
    if item is None:
        raise HTTPException(status_code=404, detail="Todo not found")
    return ApiResponse[TodoItem](
        success=True, data=item, message="Todo updated successfully"
    )


@router.delete(
    "/{todo_id}",
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
    responses={**_INVALID, **_NOT_FOUND},
    summary="Delete a todo",
)
async def delete_todo(todo_id: TodoId, service: Service) -> ApiResponse[None]:
    deleted = await service.delete_todo(todo_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Todo not found")
    return ApiResponse[None](success=True, message="Todo deleted successfully")
