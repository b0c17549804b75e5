"""
MongoDB repository backed by pymongo's asyncio client.

The client is created once per process (see `repositories.init_repository`)
and shared by every request. Documents are stored as
`{_id: ObjectId, todo, category, priority, status, dueDate}` in the
`todos` collection.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection

from .models import TodoEntity
from .repositories import Repository, parse_object_id

logger = structlog.get_logger()

COLLECTION_NAME = "todos"


def _document_to_entity(document: Dict[str, Any]) -> TodoEntity:
    document["id"] = str(document.pop("_id"))
    return document  # type: ignore[return-value]


class MongoRepository(Repository):
    """Repository implementation storing todos in a MongoDB collection."""

    name = "mongo"

    def __init__(self, client: AsyncMongoClient, database_name: str) -> None:
        self._client = client
        self._collection: AsyncCollection = client[database_name][COLLECTION_NAME]

    @classmethod
    async def connect(cls, uri: str, database_name: str) -> "MongoRepository":
        """Create a client for uri and verify the server answers a ping."""
        client: AsyncMongoClient = AsyncMongoClient(uri)
        await client.admin.command("ping")
        logger.info("mongo_connected", database=database_name, collection=COLLECTION_NAME)
        return cls(client, database_name)

    async def create(self, fields: Mapping[str, Any]) -> TodoEntity:
        document = dict(fields)
        result = await self._collection.insert_one(document)
        document["_id"] = result.inserted_id
        return _document_to_entity(document)

    async def get(self, todo_id: str) -> Optional[TodoEntity]:
        document = await self._collection.find_one({"_id": parse_object_id(todo_id)})
        return _document_to_entity(document) if document else None

    async def update(self, todo_id: str, fields: Mapping[str, Any]) -> bool:
        result = await self._collection.update_one(
            {"_id": parse_object_id(todo_id)}, {"$set": dict(fields)}
        )
        return result.matched_count > 0

    async def delete(self, todo_id: str) -> bool:
        result = await self._collection.delete_one({"_id": parse_object_id(todo_id)})
        return result.deleted_count > 0

    async def find(self, mongo_filter: Mapping[str, Any]) -> List[TodoEntity]:
        cursor = self._collection.find(dict(mongo_filter))
        return [_document_to_entity(doc) async for doc in cursor]

    async def close(self) -> None:
        await self._client.close()
