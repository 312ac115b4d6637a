"""
Authentication Routes

POST /auth/register - Register new user, returns user + token
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
GET /auth/session - Report whether the caller's token (if any) is live
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from starlette.concurrency import run_in_threadpool

from talent_portal.core.auth import (
    get_credential_store,
    get_current_user,
    get_optional_user,
    get_session_issuer,
)
from talent_portal.core.exceptions import InvalidCredentials
from talent_portal.core.rate_limit import rate_limit
from talent_portal.schemas.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    SessionStatusResponse,
    UserResponse,
)
from talent_portal.services.session_service import SessionIssuer
from talent_portal.services.user_service import CredentialStore, serialize_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("register", "register_rate_limit"))],
)
async def register(
    request: RegisterRequest,
    store: CredentialStore = Depends(get_credential_store),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """
    Register a new user account.

    The response already carries a token, so no separate login is needed.
    """
    # bcrypt blocks; run it off the event loop
    user = await run_in_threadpool(store.register, request.to_document(), request.password)
    token = issuer.issue(user)

    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(serialize_user(user)),
        token=token,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(rate_limit("login", "login_rate_limit"))],
)
async def login(
    request: LoginRequest,
    store: CredentialStore = Depends(get_credential_store),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = await run_in_threadpool(store.authenticate, request.email, request.password)
    if user is None:
        logger.info("Failed login attempt")
        raise InvalidCredentials()

    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(serialize_user(user)),
        token=issuer.issue(user),
    )


@router.get("/me", response_model=AuthResponse, response_model_exclude_none=True)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return AuthResponse(
        message="User retrieved successfully",
        user=UserResponse.model_validate(serialize_user(user)),
    )


@router.get("/session", response_model=SessionStatusResponse, response_model_exclude_none=True)
async def session_status(user: Optional[dict] = Depends(get_optional_user)):
    """Never 401s: anonymous or stale tokens simply report authenticated=false."""
    if user is None:
        return SessionStatusResponse(message="No active session", authenticated=False)
    return SessionStatusResponse(
        message="Session is active",
        authenticated=True,
        user=UserResponse.model_validate(serialize_user(user)),
    )
