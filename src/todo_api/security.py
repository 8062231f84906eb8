from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from jose import JWTError, jwt
from passlib.context import CryptContext

from .models import UserEntity
from .settings import Settings, get_settings

_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Sent with every 401 raised for a missing or unusable session.
SESSION_CHALLENGE = {"WWW-Authenticate": "Cookie"}


@dataclass(frozen=True)
class Principal:
    """Identity decoded from a session cookie."""

    user_id: int
    username: str
    role: str


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _pwd_context.verify(password, password_hash)
    except ValueError:
        # Unrecognized or corrupted hash.
        return False


def _not_authenticated(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=SESSION_CHALLENGE,
    )


# PUBLIC_INTERFACE
def create_session_token(
    user: UserEntity,
    *,
    settings: Optional[Settings] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Issue a signed session token carrying the user's claims.

    Claims:
    - sub: user id (string, per JWT convention)
    - name: username
    - role: authorization role
    - iat / exp: issue and expiry timestamps
    """
    settings = settings or get_settings()
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(minutes=settings.session_ttl_minutes)
    payload: Dict[str, Any] = {
        "sub": str(user["id"]),
        "name": user["username"],
        "role": user["role"] or settings.default_user_role,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, settings.session_secret, algorithm=settings.session_algorithm)


# PUBLIC_INTERFACE
def decode_session_token(token: str, *, settings: Optional[Settings] = None) -> Principal:
    """
    Verify a session token and return its Principal.

    Raises:
        HTTPException(401) if the signature is invalid, the token expired,
        or a required claim is missing.
    """
    settings = settings or get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
        )
    except JWTError as exc:
        raise _not_authenticated() from exc

    sub = claims.get("sub")
    name = claims.get("name")
    if not sub or not name:
        raise _not_authenticated()
    try:
        user_id = int(sub)
    except (TypeError, ValueError) as exc:
        raise _not_authenticated() from exc
    return Principal(user_id=user_id, username=name, role=claims.get("role") or settings.default_user_role)
