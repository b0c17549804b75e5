import asyncio
from types import SimpleNamespace

import pytest
from bson import ObjectId
from bson.errors import InvalidId

from todo_service.db import COLLECTION_NAME, MongoRepository


class FakeCursor:
    def __init__(self, docs):
        self._docs = list(docs)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._docs:
            raise StopAsyncIteration
        return self._docs.pop(0)


class FakeCollection:
    """Records the calls MongoRepository makes and answers from a dict keyed by _id."""

    def __init__(self):
        self.docs = {}
        self.calls = []

    async def insert_one(self, document):
        self.calls.append(("insert_one", dict(document)))
        oid = ObjectId()
        self.docs[oid] = dict(document, _id=oid)
        return SimpleNamespace(inserted_id=oid)

    async def find_one(self, query):
        self.calls.append(("find_one", query))
        doc = self.docs.get(query["_id"])
        return None if doc is None else dict(doc)

    async def update_one(self, query, update):
        self.calls.append(("update_one", query, update))
        doc = self.docs.get(query["_id"])
        if doc is None:
            return SimpleNamespace(matched_count=0)
        doc.update(update["$set"])
        return SimpleNamespace(matched_count=1)

    async def delete_one(self, query):
        self.calls.append(("delete_one", query))
        removed = self.docs.pop(query["_id"], None)
        return SimpleNamespace(deleted_count=0 if removed is None else 1)

    def find(self, query):
        self.calls.append(("find", query))
        return FakeCursor(
            dict(d) for d in self.docs.values() if all(d.get(k) == v for k, v in query.items())
        )


class FakeClient:
    def __init__(self):
        self.collection = FakeCollection()
        self.requested = None
        self.closed = False

    def __getitem__(self, database_name):
        client = self

        class _Database:
            def __getitem__(self, collection_name):
                client.requested = (database_name, collection_name)
                return client.collection

        return _Database()

    async def close(self):
        self.closed = True


def make_doc(todo="Write report", status="TO DO"):
    return {"todo": todo, "category": "WORK", "priority": "HIGH", "status": status, "dueDate": "2024-03-01"}


class TestMongoRepository:
    def test_uses_todos_collection(self):
        client = FakeClient()
        MongoRepository(client, "planner")
        assert client.requested == ("planner", COLLECTION_NAME)

    def test_create_maps_object_id_to_id(self):
        async def scenario():
            client = FakeClient()
            repo = MongoRepository(client, "todos")
            created = await repo.create(make_doc())

            assert "_id" not in created
            assert ObjectId.is_valid(created["id"])
            assert created["todo"] == "Write report"
            # the caller's fields are inserted without an id of their own
            assert client.collection.calls[0] == ("insert_one", make_doc())

            fetched = await repo.get(created["id"])
            assert fetched == created
            assert client.collection.calls[-1] == ("find_one", {"_id": ObjectId(created["id"])})

        asyncio.run(scenario())

    def test_update_writes_only_given_fields(self):
        async def scenario():
            client = FakeClient()
            repo = MongoRepository(client, "todos")
            created = await repo.create(make_doc())

            assert await repo.update(created["id"], {"status": "DONE"}) is True
            assert client.collection.calls[-1] == (
                "update_one",
                {"_id": ObjectId(created["id"])},
                {"$set": {"status": "DONE"}},
            )
            fetched = await repo.get(created["id"])
            assert fetched["status"] == "DONE"
            assert fetched["todo"] == "Write report"

            assert await repo.update(str(ObjectId()), {"status": "DONE"}) is False

        asyncio.run(scenario())

    def test_delete_reports_deleted_count(self):
        async def scenario():
            repo = MongoRepository(FakeClient(), "todos")
            created = await repo.create(make_doc())
            assert await repo.delete(created["id"]) is True
            assert await repo.delete(created["id"]) is False
            assert await repo.get(created["id"]) is None

        asyncio.run(scenario())

    def test_find_passes_filter_and_maps_ids(self):
        async def scenario():
            client = FakeClient()
            repo = MongoRepository(client, "todos")
            await repo.create(make_doc("Ship release"))
            await repo.create(make_doc("Plan sprint", status="DONE"))

            found = await repo.find({"status": "DONE"})
            assert client.collection.calls[-1] == ("find", {"status": "DONE"})
            assert [t["todo"] for t in found] == ["Plan sprint"]
            assert all("_id" not in t and ObjectId.is_valid(t["id"]) for t in found)

        asyncio.run(scenario())

    def test_malformed_id(self):
        async def scenario():
            repo = MongoRepository(FakeClient(), "todos")
            with pytest.raises(InvalidId):
                await repo.get("agenda")

        asyncio.run(scenario())

    def test_close_closes_client(self):
        client = FakeClient()
        asyncio.run(MongoRepository(client, "todos").close())
        assert client.closed is True
