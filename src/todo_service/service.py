"""
Business rules for todo records.

`TodoService` sits between the HTTP routes and a `Repository`. It builds
query filters, merges and validates updates, normalizes due dates and maps
every store failure onto the service error taxonomy:

- bson.errors.InvalidId -> ValidationError("Invalid Todo Id")
- anything else raised by the store -> StoreError (logged, no detail leaked)
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional

import structlog
from bson.errors import InvalidId

from .exceptions import NotFoundError, StoreError, TodoServiceError, ValidationError
from .models import TODO_FIELDS, TodoEntity
from .repositories import ListQuery, Repository, build_filter
from .validation import normalize_due_date, validate_todo

logger = structlog.get_logger()

INVALID_TODO_ID = "Invalid Todo Id"
NO_UPDATE_FIELDS = "No Todo Fields To Update"

TODO_ADDED = "Todo Successfully Added"
TODO_DELETED = "Todo Deleted"


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except TodoServiceError:
        raise
    except InvalidId as exc:
        raise ValidationError(INVALID_TODO_ID) from exc
    except Exception as exc:
        logger.exception("store_operation_failed", operation=operation)
        raise StoreError() from exc


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value if value else None


# PUBLIC_INTERFACE
class TodoService:
    """Todo operations on top of a Repository."""

    def __init__(self, repo: Repository) -> None:
        self._repo = repo

    async def list_todos(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        category: Optional[str] = None,
        search_q: Optional[str] = None,
        due_date: Optional[str] = None,
    ) -> List[TodoEntity]:
        """
        Return every todo matching all supplied filters.

        Empty or missing filters are skipped. due_date is normalized first and
        an unparseable one raises ValidationError.
        """
        query = ListQuery(
            status=_blank_to_none(status),
            priority=_blank_to_none(priority),
            category=_blank_to_none(category),
            search=_blank_to_none(search_q),
            due_date=normalize_due_date(due_date) if due_date else None,
        )
        with _store_errors("list"):
            return await self._repo.find(build_filter(query))

    async def agenda(self, day: Any) -> List[TodoEntity]:
        """Return the todos due on the calendar date of day."""
        mongo_filter = build_filter(ListQuery(due_date=normalize_due_date(day)))
        with _store_errors("agenda"):
            return await self._repo.find(mongo_filter)

    async def get_todo(self, todo_id: str) -> TodoEntity:
        with _store_errors("get"):
            todo = await self._repo.get(todo_id)
        if todo is None:
            raise NotFoundError()
        return todo

    async def create_todo(self, payload: Mapping[str, Any]) -> TodoEntity:
        """
        Validate and persist a new todo. Only the known data fields are kept;
        dueDate is stored as yyyy-MM-dd.
        """
        error = validate_todo(payload)
        if error:
            raise ValidationError(error)

        fields = {key: payload[key] for key in TODO_FIELDS}
        fields["dueDate"] = normalize_due_date(fields["dueDate"])
        with _store_errors("create"):
            created = await self._repo.create(fields)
        logger.info("todo_created", todo_id=created["id"])
        return created

    async def update_todo(self, todo_id: str, payload: Mapping[str, Any]) -> str:
        """
        Apply a partial update and return the name of the first updated field.

        The existing record merged with the payload must pass validation;
        only the supplied fields are written.
        """
        updates: Dict[str, Any] = {k: v for k, v in payload.items() if k in TODO_FIELDS}
        existing = await self.get_todo(todo_id)
        if not updates:
            raise ValidationError(NO_UPDATE_FIELDS)

        error = validate_todo({**existing, **updates})
        if error:
            raise ValidationError(error)

        if "dueDate" in updates:
            updates["dueDate"] = normalize_due_date(updates["dueDate"])
        with _store_errors("update"):
            found = await self._repo.update(todo_id, updates)
        # Deleted between the read and the write.
        if not found:
            raise NotFoundError()

        first_key = next(iter(updates))
        logger.info("todo_updated", todo_id=todo_id, fields=list(updates))
        return first_key

    async def delete_todo(self, todo_id: str) -> None:
        with _store_errors("delete"):
            deleted = await self._repo.delete(todo_id)
        if not deleted:
            raise NotFoundError()
        logger.info("todo_deleted", todo_id=todo_id)
