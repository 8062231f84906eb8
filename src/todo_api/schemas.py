from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# passlib refuses to hash longer secrets (passlib.exc.PasswordSizeError).
PASSWORD_MAX_LENGTH = 4096


def _require_text(value: Optional[str], field: str) -> str:
    """
    Reject missing, empty or whitespace-only strings.
    """
    if value is None or not value.strip():
        raise ValueError(f"{field} is required")
    return value


# PUBLIC_INTERFACE
class UserRegister(BaseModel):
    """
    Schema for registering a new account.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"username": "alice", "password": "pw1"}}
    )

    username: str = Field(..., description="Login name, unique ignoring case", max_length=150)
    password: str = Field(
        ..., description="Account password", max_length=PASSWORD_MAX_LENGTH
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """
        Reject blank usernames; the value is stored as sent, without trimming.
        """
        return _require_text(v, "username")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """
        Reject blank passwords; the value is not trimmed.
        """
        return _require_text(v, "password")


# PUBLIC_INTERFACE
class UserLogin(BaseModel):
    """
    Credentials presented at login. No blank checks here: a bad pair is a 401, not a 400.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"username": "alice", "password": "pw1"}}
    )

    username: str = Field(..., description="Login name (matched ignoring case)")
    password: str = Field(..., description="Account password", max_length=PASSWORD_MAX_LENGTH)


# PUBLIC_INTERFACE
class UserOut(BaseModel):
    """
    Public profile of an account. The password hash is never exposed.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"id": 1, "username": "alice", "role": "User"}}
    )

    id: int = Field(..., description="Unique identifier of the user")
    username: str = Field(..., description="Login name")
    role: Optional[str] = Field(default=None, description="Authorization role")


# PUBLIC_INTERFACE
class MessageOut(BaseModel):
    """Simple informational response."""

    message: str


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.

    `isComplete` is the wire name; `is_complete` is accepted as well.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"name": "buy milk", "isComplete": False}},
    )

    name: str = Field(..., description="What needs doing", max_length=500)
    is_complete: bool = Field(default=False, alias="isComplete", description="Completion status flag")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """
        Strip whitespace and reject an empty name.
        """
        return _require_text(v, "name").strip()


# PUBLIC_INTERFACE
class TodoUpdate(TodoCreate):
    """
    Schema for replacing a Todo item. Both fields are written; an omitted
    `isComplete` resets the flag to false.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"name": "buy oat milk", "isComplete": True}},
    )


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"id": 1, "name": "buy milk", "isComplete": False}},
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    name: str = Field(..., description="What needs doing")
    is_complete: bool = Field(..., alias="isComplete", description="Completion status flag")
