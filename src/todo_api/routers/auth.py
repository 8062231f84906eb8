from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..auth import get_current_principal
from ..models import UserEntity
from ..repositories import UserRepository, UsernameTakenError, get_user_repository
from ..schemas import MessageOut, UserLogin, UserOut, UserRegister
from ..security import SESSION_CHALLENGE, Principal, create_session_token, hash_password, verify_password
from ..settings import get_settings

logger = logging.getLogger(__name__)

# Mounted under /auth, and under the legacy /tasks prefix (hidden from the schema).
router = APIRouter(tags=["auth"])


def _profile(user: UserEntity) -> UserOut:
    return UserOut(id=user["id"], username=user["username"], role=user["role"])


# PUBLIC_INTERFACE
@router.post(
    "/register",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register User",
    description="Create an account with the default role. Usernames are unique ignoring case.",
    responses={
        201: {"description": "User created"},
        400: {"description": "Username or password missing"},
        409: {"description": "User already exists"},
    },
)
def register_user(
    payload: UserRegister,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
) -> UserOut:
    """
    Register a new user.
    """
    try:
        user = users.add(
            username=payload.username,
            password_hash=hash_password(payload.password),
            role=get_settings().default_user_role,
        )
    except UsernameTakenError:
        logger.info("Registration rejected: username %r already exists", payload.username)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")

    logger.info("Registered user id=%s", user["id"])
    response.headers["Location"] = f"/auth/{user['id']}"
    return _profile(user)


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=UserOut,
    summary="Login User",
    description="Verify credentials and issue the session cookie.",
    responses={
        200: {"description": "Logged in; session cookie set"},
        401: {"description": "Invalid username or password"},
    },
)
def login_user(
    payload: UserLogin,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
) -> UserOut:
    """
    Authenticate and establish a cookie session carrying name, id and role claims.
    """
    user = users.find_by_username(payload.username)
    if user is None or not verify_password(payload.password, user["password_hash"]):
        logger.warning("Failed login for username %r", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_token(user, settings=settings),
        max_age=settings.session_ttl_minutes * 60,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    logger.info("User id=%s logged in", user["id"])
    return _profile(user)


# PUBLIC_INTERFACE
@router.post(
    "/logout",
    response_model=MessageOut,
    summary="Logout User",
    description="Clear the session cookie. Succeeds whether or not a session existed.",
    responses={200: {"description": "Logged out"}},
)
def logout_user(response: Response) -> MessageOut:
    """
    Drop the session cookie unconditionally.
    """
    settings = get_settings()
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    logger.info("Session cookie cleared")
    return MessageOut(message="Logged out")


# PUBLIC_INTERFACE
@router.get(
    "/me",
    response_model=UserOut,
    summary="Current User",
    description="Return the profile bound to the current session.",
    responses={
        200: {"description": "Current user"},
        401: {"description": "Not authenticated"},
    },
)
def current_user(
    principal: Principal = Depends(get_current_principal),
    users: UserRepository = Depends(get_user_repository),
) -> UserOut:
    user = users.get(principal.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers=SESSION_CHALLENGE,
        )
    return _profile(user)
