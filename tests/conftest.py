import os

import pytest
from fastapi.testclient import TestClient

# Default to the memory backend so tests never need a running MongoDB
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from todo_service.main import create_app  # noqa: E402


@pytest.fixture
def client(monkeypatch):
    """
    A TestClient over a fresh app. Entering the client runs the lifespan, so
    every test gets its own empty in-memory store.
    """
    monkeypatch.setenv("PERSISTENCE_BACKEND", "memory")
    with TestClient(create_app()) as c:
        yield c
