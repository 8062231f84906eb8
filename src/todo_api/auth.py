from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyCookie

from .repositories import UserRepository, get_user_repository
from .security import SESSION_CHALLENGE, Principal, decode_session_token
from .settings import get_settings

logger = logging.getLogger(__name__)

# Registers the 'cookieAuth' scheme in OpenAPI; the value itself is read in the dependency.
cookie_scheme = APIKeyCookie(
    name=get_settings().session_cookie_name,
    scheme_name="cookieAuth",
    description="Cookie-based authentication",
    auto_error=False,
)


# PUBLIC_INTERFACE
def get_current_principal(
    request: Request,
    _cookie: Optional[str] = Depends(cookie_scheme),
    users: UserRepository = Depends(get_user_repository),
) -> Principal:
    """
    Resolve the caller from the session cookie.

    Raises:
        HTTPException(401) if the cookie is missing, invalid, expired, or names
        a user that no longer exists in the store.
    """
    token = request.cookies.get(get_settings().session_cookie_name)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers=SESSION_CHALLENGE,
        )

    principal = decode_session_token(token)
    if users.get(principal.user_id) is None:
        # Store was reset since the cookie was issued.
        logger.info("Session for unknown user id=%s rejected", principal.user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers=SESSION_CHALLENGE,
        )
    return principal


# PUBLIC_INTERFACE
def require_roles(roles: Optional[Iterable[str]] = None) -> Callable[..., Principal]:
    """
    Return a FastAPI dependency that admits only authenticated callers whose
    role is in `roles` (defaults to TODO_ALLOWED_ROLES from settings).

    Behavior:
    - No or invalid session: 401 (raised by get_current_principal).
    - Authenticated with a role outside the allowed set: 403.

    Usage:
        router = APIRouter(dependencies=[Depends(require_roles())])
    """
    allowed = {r.casefold() for r in (roles if roles is not None else get_settings().todo_allowed_roles)}

    def _enforce(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role.casefold() not in allowed:
            logger.warning(
                "User id=%s with role %r denied access", principal.user_id, principal.role
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return principal

    return _enforce
