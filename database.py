"""
Flat-file persistence for users and todos.

Each store keeps its whole collection in one pretty-printed JSON array.
Every mutation is read the whole file, change it in memory, write the whole
file back. There is no locking: concurrent writers can lose updates.
"""

import os
from typing import Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError
from sqlmodel import SQLModel

from config import get_settings
from models import Todo, User
from utils.logger import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class StorageError(Exception):
    """Raised when a store file cannot be read, decoded or written"""


class JsonFileStore(Generic[ModelT]):
    """Load and save a list of models as a single JSON file"""

    model: Type[ModelT]

    def __init__(self, path: str):
        self.path = path
        self._adapter = TypeAdapter(List[self.model])

    def load(self) -> List[ModelT]:
        """
        Read the whole collection

        Returns:
            All records in file order; an empty list if the file is missing or empty

        Raises:
            StorageError: If the file cannot be read or does not hold valid records
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = f.read()
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(f"Could not read {self.path}: {exc}") from exc

        if not data.strip():
            return []

        try:
            return self._adapter.validate_json(data)
        except ValidationError as exc:
            raise StorageError(f"Could not decode {self.path}: {exc}") from exc

    def save(self, items: Sequence[ModelT]) -> None:
        """Serialize the whole collection and overwrite the file"""
        try:
            payload = self._adapter.dump_json(list(items), indent=2)
            with open(self.path, "wb") as f:
                f.write(payload)
        except (OSError, PydanticSerializationError) as exc:
            raise StorageError(f"Could not write {self.path}: {exc}") from exc


class UserStore(JsonFileStore[User]):
    model = User

    def find(self, username: str) -> Optional[User]:
        """Return the user with this username, if any"""
        for user in self.load():
            if user.username == username:
                return user
        return None


class TodoStore(JsonFileStore[Todo]):
    model = Todo


def next_todo_id(todos: Sequence[Todo]) -> int:
    """Next id for a new todo: highest existing id plus one, or 1 when empty"""
    return max((todo.id for todo in todos), default=0) + 1


def get_user_store() -> UserStore:
    """Get user store - used as FastAPI dependency"""
    settings = get_settings()
    return UserStore(settings.users_file)


def get_todo_store() -> TodoStore:
    """Get todo store - used as FastAPI dependency"""
    settings = get_settings()
    return TodoStore(settings.todos_file)


def ensure_parent_dir(path: str) -> None:
    """Create the directory holding a store file if it is missing"""
    directory = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(directory):
        os.makedirs(directory, exist_ok=True)
        logger.info("Created data directory %s", directory)
