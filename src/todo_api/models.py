from __future__ import annotations

from typing import TypedDict


# PUBLIC_INTERFACE
class UserEntity(TypedDict):
    """
    A registered account as kept by the user store.

    Fields:
    - id: Sequential integer identifier (1-based, never reused)
    - username: Login name, unique ignoring case
    - password_hash: Salted one-way hash of the password
    - role: Authorization role, 'User' unless configured otherwise
    """

    id: int
    username: str
    password_hash: str
    role: str


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A Todo item as kept by the todo store.

    Fields:
    - id: Unique integer identifier assigned by the store
    - name: Free text, trimmed on input via schemas
    - is_complete: Boolean completion flag
    """

    id: int
    name: str
    is_complete: bool
