"""Shared fixtures for the API tests."""

from typing import Callable

import pytest
from fastapi.testclient import TestClient

from todo_api.main import app
from todo_api.repositories import reset_repositories


@pytest.fixture(autouse=True)
def reset_store():
    """Start every test with empty user and todo stores."""
    reset_repositories()
    yield
    reset_repositories()


@pytest.fixture
def client() -> TestClient:
    """Provide a FastAPI test client with its own cookie jar."""
    return TestClient(app)


@pytest.fixture
def make_client() -> Callable[[], TestClient]:
    """Factory for extra clients, one per simulated browser."""
    return lambda: TestClient(app)


def register(client: TestClient, username: str = "alice", password: str = "pw1"):
    return client.post("/auth/register", json={"username": username, "password": password})


def login(client: TestClient, username: str = "alice", password: str = "pw1"):
    return client.post("/auth/login", json={"username": username, "password": password})


@pytest.fixture
def auth_client(client: TestClient) -> TestClient:
    """A client holding a valid session cookie for user 'alice'."""
    assert register(client).status_code == 201
    assert login(client).status_code == 200
    return client
