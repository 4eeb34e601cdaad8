from __future__ import annotations

import os
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("TURNSTILE_SECRET", "test-turnstile-secret")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")

from database import TodoStore, UserStore, get_todo_store, get_user_store  # noqa: E402
from main import app  # noqa: E402
from models import Todo, User  # noqa: E402
from utils.captcha import get_captcha_verifier  # noqa: E402


class InMemoryUserStore(UserStore):
    def __init__(self, users: Optional[List[User]] = None) -> None:
        super().__init__(path=":memory:")
        self.items = list(users or [])
        self.saves = 0

    def load(self) -> List[User]:
        return [user.model_copy() for user in self.items]

    def save(self, items) -> None:
        self.items = [user.model_copy() for user in items]
        self.saves += 1


class InMemoryTodoStore(TodoStore):
    def __init__(self, todos: Optional[List[Todo]] = None) -> None:
        super().__init__(path=":memory:")
        self.items = list(todos or [])
        self.saves = 0

    def load(self) -> List[Todo]:
        return [todo.model_copy() for todo in self.items]

    def save(self, items) -> None:
        self.items = [todo.model_copy() for todo in items]
        self.saves += 1


class FakeCaptcha:
    def __init__(self, passes: bool = True) -> None:
        self.passes = passes
        self.calls: list[tuple[str, Optional[str]]] = []

    def __call__(self, token: str, remote_ip: Optional[str] = None) -> bool:
        self.calls.append((token, remote_ip))
        return self.passes


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def todo_store() -> InMemoryTodoStore:
    return InMemoryTodoStore()


@pytest.fixture
def captcha() -> FakeCaptcha:
    return FakeCaptcha()


@pytest.fixture
def client(user_store, todo_store, captcha):
    app.dependency_overrides[get_user_store] = lambda: user_store
    app.dependency_overrides[get_todo_store] = lambda: todo_store
    app.dependency_overrides[get_captcha_verifier] = lambda: captcha
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
