from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import structlog
from bson import ObjectId

from .models import TodoEntity
from .settings import Settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class ListQuery:
    """
    Filters for listing todos. None means "do not filter on this field".
    due_date must already be normalized to 'yyyy-MM-dd'.
    """
    status: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    search: Optional[str] = None
    due_date: Optional[str] = None


# PUBLIC_INTERFACE
def build_filter(query: ListQuery) -> Dict[str, Any]:
    """
    Build the Mongo filter document for a ListQuery.

    Present filters are AND-combined; `search` is a case-insensitive regex
    on the todo text.
    """
    mongo_filter: Dict[str, Any] = {}
    if query.status:
        mongo_filter["status"] = query.status
    if query.priority:
        mongo_filter["priority"] = query.priority
    if query.category:
        mongo_filter["category"] = query.category
    if query.search:
        mongo_filter["todo"] = {"$regex": query.search, "$options": "i"}
    if query.due_date:
        mongo_filter["dueDate"] = query.due_date
    return mongo_filter


# PUBLIC_INTERFACE
def parse_object_id(todo_id: str) -> ObjectId:
    """
    Convert a path identifier to an ObjectId.

    Raises:
        bson.errors.InvalidId: if todo_id is not a 24-hex string.
    """
    return ObjectId(todo_id)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    name: str = "abstract"

    @abstractmethod
    async def create(self, fields: Mapping[str, Any]) -> TodoEntity:
        """Insert a new document and return it with its store-assigned id."""

    @abstractmethod
    async def get(self, todo_id: str) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    async def update(self, todo_id: str, fields: Mapping[str, Any]) -> bool:
        """Set the given fields on an existing document. Return False if not found."""

    @abstractmethod
    async def delete(self, todo_id: str) -> bool:
        """Delete a document by id. Return True if deleted, False if not found."""

    @abstractmethod
    async def find(self, mongo_filter: Mapping[str, Any]) -> List[TodoEntity]:
        """Return all documents matching a filter produced by build_filter."""

    async def close(self) -> None:
        """Release backend resources. No-op unless the backend holds any."""
        return None


def _matches(doc: Mapping[str, Any], mongo_filter: Mapping[str, Any]) -> bool:
    for field, cond in mongo_filter.items():
        value = doc.get(field)
        if isinstance(cond, dict) and "$regex" in cond:
            flags = re.IGNORECASE if "i" in cond.get("$options", "") else 0
            if not isinstance(value, str) or re.search(cond["$regex"], value, flags) is None:
                return False
        elif value != cond:
            return False
    return True


class InMemoryRepository(Repository):
    """
    In-process repository holding documents in insertion order.

    Evaluates the same filter documents the Mongo backend receives
    (equality and $regex/$options only). Suitable for tests and local runs.
    """

    name = "memory"

    def __init__(self) -> None:
        self._items: Dict[ObjectId, Dict[str, Any]] = {}

    @staticmethod
    def _to_entity(oid: ObjectId, doc: Mapping[str, Any]) -> TodoEntity:
        entity = dict(doc)
        entity["id"] = str(oid)
        return entity  # type: ignore[return-value]

    async def create(self, fields: Mapping[str, Any]) -> TodoEntity:
        oid = ObjectId()
        self._items[oid] = dict(fields)
        return self._to_entity(oid, fields)

    async def get(self, todo_id: str) -> Optional[TodoEntity]:
        oid = parse_object_id(todo_id)
        doc = self._items.get(oid)
        return None if doc is None else self._to_entity(oid, doc)

    async def update(self, todo_id: str, fields: Mapping[str, Any]) -> bool:
        oid = parse_object_id(todo_id)
        doc = self._items.get(oid)
        if doc is None:
            return False
        doc.update(fields)
        return True

    async def delete(self, todo_id: str) -> bool:
        oid = parse_object_id(todo_id)
        return self._items.pop(oid, None) is not None

    async def find(self, mongo_filter: Mapping[str, Any]) -> List[TodoEntity]:
        return [
            self._to_entity(oid, doc)
            for oid, doc in list(self._items.items())
            if _matches(doc, mongo_filter)
        ]


_repository: Optional[Repository] = None


# PUBLIC_INTERFACE
async def init_repository(settings: Settings) -> Repository:
    """
    Create the process-wide repository for the configured backend.
    - memory: InMemoryRepository
    - mongo: MongoRepository (connects and pings the server)
    Calling it again while a repository is active returns the active one.
    """
    global _repository
    if _repository is not None:
        return _repository

    if settings.persistence_backend == "memory":
        repo: Repository = InMemoryRepository()
    else:
        from .db import MongoRepository

        repo = await MongoRepository.connect(settings.mongo_uri, settings.mongo_db_name)

    _repository = repo
    logger.info("repository_initialized", backend=repo.name)
    return repo


# PUBLIC_INTERFACE
async def close_repository() -> None:
    """Close and forget the process-wide repository, if any."""
    global _repository
    if _repository is None:
        return None
    repo, _repository = _repository, None
    await repo.close()


# PUBLIC_INTERFACE
def get_repository() -> Repository:
    """FastAPI dependency returning the repository acquired at startup."""
    if _repository is None:
        raise RuntimeError("Repository is not initialized. Call init_repository() on startup.")
    return _repository
