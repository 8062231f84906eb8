from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict, List, Optional

from .models import TodoEntity, UserEntity
from .schemas import TodoCreate, TodoUpdate

logger = logging.getLogger(__name__)


class UsernameTakenError(Exception):
    """Raised when registering a username that already exists (ignoring case)."""

    def __init__(self, username: str) -> None:
        super().__init__(f"username already taken: {username}")
        self.username = username


# PUBLIC_INTERFACE
class UserRepository(ABC):
    """Abstract contract for account storage backends."""

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[UserEntity]:
        """Return the user whose username matches ignoring case, or None."""

    @abstractmethod
    def get(self, user_id: int) -> Optional[UserEntity]:
        """Return a user by id, or None if not found."""

    @abstractmethod
    def add(self, username: str, password_hash: str, role: str) -> UserEntity:
        """
        Insert a user and return it with its assigned id.
        Raises UsernameTakenError if the username is already registered.
        """

    @abstractmethod
    def count(self) -> int:
        """Return the number of registered users."""


# PUBLIC_INTERFACE
class TodoRepository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def list(self) -> List[TodoEntity]:
        """Return every TodoEntity ordered by id."""

    @abstractmethod
    def get(self, todo_id: int) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    def create(self, data: TodoCreate) -> TodoEntity:
        """Create and return a new TodoEntity."""

    @abstractmethod
    def replace(self, todo_id: int, data: TodoUpdate) -> Optional[TodoEntity]:
        """Overwrite name and completion flag. Return updated entity or None if not found."""

    @abstractmethod
    def delete(self, todo_id: int) -> bool:
        """Delete a TodoEntity by id. Return True if deleted, False if not found."""


class InMemoryUserRepository(UserRepository):
    """
    Thread-safe in-memory account store.

    Ids are count + 1 at insertion time. Users are never removed, so ids are
    never reused. The uniqueness check and the append happen under one lock.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._users: List[UserEntity] = []

    @staticmethod
    def _key(username: str) -> str:
        return username.casefold()

    def _find_unlocked(self, username: str) -> Optional[UserEntity]:
        key = self._key(username)
        for user in self._users:
            if self._key(user["username"]) == key:
                return user
        return None

    def find_by_username(self, username: str) -> Optional[UserEntity]:
        with self._lock:
            user = self._find_unlocked(username)
            return None if user is None else user.copy()

    def get(self, user_id: int) -> Optional[UserEntity]:
        with self._lock:
            if 1 <= user_id <= len(self._users):
                return self._users[user_id - 1].copy()
            return None

    def add(self, username: str, password_hash: str, role: str) -> UserEntity:
        with self._lock:
            if self._find_unlocked(username) is not None:
                raise UsernameTakenError(username)
            user: UserEntity = {
                "id": len(self._users) + 1,
                "username": username,
                "password_hash": password_hash,
                "role": role,
            }
            self._users.append(user)
            logger.debug("Stored user id=%s", user["id"])
            return user.copy()

    def count(self) -> int:
        with self._lock:
            return len(self._users)


class InMemoryTodoRepository(TodoRepository):
    """
    Thread-safe in-memory todo store suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[int, TodoEntity] = {}
        self._next_id = 1

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def list(self) -> List[TodoEntity]:
        with self._lock:
            # Return copies to avoid external mutation
            return [self._items[k].copy() for k in sorted(self._items)]

    def get(self, todo_id: int) -> Optional[TodoEntity]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else item.copy()

    def create(self, data: TodoCreate) -> TodoEntity:
        with self._lock:
            entity: TodoEntity = {
                "id": self._allocate_id(),
                "name": data.name,
                "is_complete": data.is_complete,
            }
            self._items[entity["id"]] = entity
            return entity.copy()

    def replace(self, todo_id: int, data: TodoUpdate) -> Optional[TodoEntity]:
        with self._lock:
            existing = self._items.get(todo_id)
            if existing is None:
                return None
            updated = existing.copy()
            updated["name"] = data.name
            updated["is_complete"] = data.is_complete
            self._items[todo_id] = updated
            return updated.copy()

    def delete(self, todo_id: int) -> bool:
        with self._lock:
            return self._items.pop(todo_id, None) is not None


_user_repository: Optional[InMemoryUserRepository] = None
_todo_repository: Optional[InMemoryTodoRepository] = None
_singleton_lock = RLock()


# PUBLIC_INTERFACE
def get_user_repository() -> UserRepository:
    """Return the process-wide user store (FastAPI dependency)."""
    global _user_repository
    with _singleton_lock:
        if _user_repository is None:
            _user_repository = InMemoryUserRepository()
        return _user_repository


# PUBLIC_INTERFACE
def get_todo_repository() -> TodoRepository:
    """Return the process-wide todo store (FastAPI dependency)."""
    global _todo_repository
    with _singleton_lock:
        if _todo_repository is None:
            _todo_repository = InMemoryTodoRepository()
        return _todo_repository


# PUBLIC_INTERFACE
def reset_repositories() -> None:
    """Drop all stored users and todos. Intended for tests and local tooling."""
    global _user_repository, _todo_repository
    with _singleton_lock:
        _user_repository = None
        _todo_repository = None
