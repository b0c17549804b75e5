from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import PlainTextResponse

from ..repositories import Repository, get_repository
from ..schemas import TodoCreate, TodoOut
from ..service import TODO_ADDED, TODO_DELETED, TodoService

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

_ERRORS = {
    400: {"description": "Validation error", "content": {"text/plain": {}}},
    500: {"description": "Server Error", "content": {"text/plain": {}}},
}
_NOT_FOUND = {404: {"description": "Todo not found", "content": {"text/plain": {}}}}


def _get_service(repo: Repository = Depends(get_repository)) -> TodoService:
    """
    Dependency building a TodoService over the process-wide repository.
    """
    return TodoService(repo)


# PUBLIC_INTERFACE
@router.get("/", response_model=List[TodoOut], include_in_schema=False)
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description=(
        "List todos matching every supplied filter.\n\n"
        "Query parameters:\n"
        "- status, priority, category: exact match\n"
        "- search_q: case-insensitive regex match on the todo text\n"
        "- dueDate: any parseable date; matched on its yyyy-MM-dd form\n\n"
        "Missing or empty filters are ignored."
    ),
    responses=_ERRORS,
)
async def list_todos(
    status_: Optional[str] = Query(None, alias="status", description="Filter by status"),
    priority: Optional[str] = Query(None, description="Filter by priority"),
    category: Optional[str] = Query(None, description="Filter by category"),
    search_q: Optional[str] = Query(None, description="Search text for the todo field"),
    due_date: Optional[str] = Query(None, alias="dueDate", description="Filter by due date"),
    service: TodoService = Depends(_get_service),
) -> List[TodoOut]:
    """
    List todos with filters. Results come back in store order.
    """
    items = await service.list_todos(
        status=status_,
        priority=priority,
        category=category,
        search_q=search_q,
        due_date=due_date,
    )
    return [TodoOut(**it) for it in items]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/agenda",
    response_model=List[TodoOut],
    summary="Agenda",
    description="List the todos due on the given date.",
    responses=_ERRORS,
)
async def agenda(
    date: Optional[str] = Query(None, description="Day to list; any parseable date"),
    service: TodoService = Depends(_get_service),
) -> List[TodoOut]:
    """
    Declared before /{todo_id} so the literal segment is not taken for an id.
    """
    items = await service.agenda(date)
    return [TodoOut(**it) for it in items]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={**_ERRORS, **_NOT_FOUND},
)
async def get_todo(todo_id: str, service: TodoService = Depends(_get_service)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    item = await service.get_todo(todo_id)
    return TodoOut(**item)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_class=PlainTextResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
@router.post(
    "",
    response_class=PlainTextResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Validate and store a new Todo item. Any id in the body is ignored.",
    responses={201: {"description": "Todo created successfully"}, **_ERRORS},
)
async def create_todo(payload: TodoCreate, service: TodoService = Depends(_get_service)) -> str:
    """
    Create a new Todo.
    """
    await service.create_todo(payload.model_dump())
    return TODO_ADDED


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_class=PlainTextResponse,
    summary="Update Todo",
    description=(
        "Partially update a Todo item. The stored record merged with the body must "
        "be valid; only the supplied fields are written. The response names the "
        "first updated field."
    ),
    responses={200: {"description": "Todo updated"}, **_ERRORS, **_NOT_FOUND},
)
async def update_todo(
    todo_id: str,
    payload: Dict[str, Any] = Body(..., examples=[{"status": "DONE"}]),
    service: TodoService = Depends(_get_service),
) -> str:
    """
    Partial update of a Todo item.
    """
    field = await service.update_todo(todo_id, payload)
    return f"{field} Updated"


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_class=PlainTextResponse,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={200: {"description": "Todo deleted"}, **_ERRORS, **_NOT_FOUND},
)
async def delete_todo(todo_id: str, service: TodoService = Depends(_get_service)) -> str:
    """
    Delete a Todo. Returns 200 with a confirmation, 404 if not found.
    """
    await service.delete_todo(todo_id)
    return TODO_DELETED
