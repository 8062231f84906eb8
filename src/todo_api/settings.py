from __future__ import annotations

import os
import secrets
from dataclasses import dataclass
from functools import lru_cache
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - SESSION_SECRET: key used to sign session cookies (random per process when unset)
    - SESSION_COOKIE_NAME: name of the session cookie. Default 'MyApp.AuthCookie'
    - SESSION_TTL_MINUTES: lifetime of a session in minutes. Default 60
    - SESSION_COOKIE_SECURE: 'true' to mark the cookie Secure (default: false)
    - SESSION_ALGORITHM: JWT signing algorithm. Default 'HS256'
    - DEFAULT_USER_ROLE: role given to newly registered users. Default 'User'
    - TODO_ALLOWED_ROLES: comma-separated roles allowed on todo routes. Default 'User,Admin'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root logging level. Default 'INFO'
    - HOST / PORT: bind address for the bundled runner. Default localhost:5000
    """

    session_secret: str
    session_cookie_name: str
    session_ttl_minutes: int
    session_cookie_secure: bool
    session_algorithm: str
    default_user_role: str
    todo_allowed_roles: List[str]
    cors_allow_origins: List[str]
    log_level: str
    host: str
    port: int


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(value: str, default: int, minimum: int = 1) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _parse_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return _parse_list(value)


# Generated once so every request in this process verifies against the same key.
_PROCESS_SECRET = secrets.token_urlsafe(32)


def load_settings() -> Settings:
    """Build settings from the current environment without caching."""
    roles = _parse_list(_get_env("TODO_ALLOWED_ROLES", "User,Admin"))
    return Settings(
        session_secret=_get_env("SESSION_SECRET", _PROCESS_SECRET),
        session_cookie_name=_get_env("SESSION_COOKIE_NAME", "MyApp.AuthCookie").strip(),
        session_ttl_minutes=_parse_int(_get_env("SESSION_TTL_MINUTES", "60"), 60),
        session_cookie_secure=_parse_bool(_get_env("SESSION_COOKIE_SECURE", "false"), False),
        session_algorithm=_get_env("SESSION_ALGORITHM", "HS256").strip(),
        default_user_role=_get_env("DEFAULT_USER_ROLE", "User").strip(),
        todo_allowed_roles=roles or ["User", "Admin"],
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        host=_get_env("HOST", "localhost").strip(),
        port=_parse_int(_get_env("PORT", "5000"), 5000),
    )


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return application settings loaded from environment variables (cached)."""
    return load_settings()
