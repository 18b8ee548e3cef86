"""Pytest configuration and fixtures."""

import pytest

from vertexdb import VertexDB
from vertexdb.core.config import ENV_LOGGING, ENV_SOFT_DELETE, ENV_TIMESTAMPS

USER_SCHEMA = {
    "id": {"type": "number", "required": True},
    "name": {"type": "string", "required": True},
    "email": {
        "type": "string",
        "required": True,
        "pattern": r"^[^\s@]+@[^\s@]+\.[^\s@]+$",
    },
    "age": {"type": "number", "min": 18, "max": 100},
}

POST_SCHEMA = {
    "id": {"type": "number", "required": True},
    "user_id": {"type": "number", "required": True},
    "title": {"type": "string", "required": True},
    "content": {"type": "string", "required": True},
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep VERTEXDB_* variables from leaking into tests."""
    for name in (ENV_LOGGING, ENV_TIMESTAMPS, ENV_SOFT_DELETE):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def db():
    """Fresh store with default options."""
    return VertexDB()


@pytest.fixture
def soft_db():
    """Fresh store with soft delete enabled."""
    return VertexDB(soft_delete=True)


@pytest.fixture
def seeded_db():
    """Store with users and posts tables, two rows each."""
    store = VertexDB()
    store.create_table("users", USER_SCHEMA).create_table("posts", POST_SCHEMA)
    store.insert(
        "users",
        {"id": VertexDB.AUTO_INCREMENT, "name": "John Doe", "email": "john@example.com", "age": 30},
    )
    store.insert(
        "users",
        {"id": VertexDB.AUTO_INCREMENT, "name": "Jane Smith", "email": "jane@example.com", "age": 25},
    )
    store.insert(
        "posts",
        {"id": VertexDB.AUTO_INCREMENT, "user_id": 1, "title": "First Post", "content": "This is my first post!"},
    )
    store.insert(
        "posts",
        {"id": VertexDB.AUTO_INCREMENT, "user_id": 1, "title": "Second Post", "content": "Another great post!"},
    )
    return store


@pytest.fixture
def log_lines():
    """List collecting messages from a logging sink."""
    return []
