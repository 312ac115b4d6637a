"""
Authentication Utility - wiring the credential store and session issuer
into FastAPI.

Provides:
- dependency factories for the store and the issuer
- get_current_user: bearer token required
- get_optional_user: bearer token honoured if present, never fails
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from pymongo.collection import Collection

from talent_portal.core.config import Settings, get_settings
from talent_portal.core.exceptions import AuthenticationFailed
from talent_portal.db.mongodb import get_users_collection
from talent_portal.services.session_service import SessionIssuer
from talent_portal.services.user_service import CredentialStore, build_pwd_context

# Bearer token extractor; auto_error off so a missing header gets our 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache()
def _pwd_context(rounds: int) -> CryptContext:
    return build_pwd_context(rounds)


def get_credential_store(
    collection: Collection = Depends(get_users_collection),
    settings: Settings = Depends(get_settings),
) -> CredentialStore:
    return CredentialStore(collection, _pwd_context(settings.bcrypt_rounds))


def get_session_issuer(
    store: CredentialStore = Depends(get_credential_store),
    settings: Settings = Depends(get_settings),
) -> SessionIssuer:
    return SessionIssuer(settings, store)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationFailed("Access denied. No token provided.")
    return issuer.verify(credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> Optional[dict]:
    """Like get_current_user, but anonymous callers get None instead of a 401."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return issuer.verify(credentials.credentials)
    except AuthenticationFailed:
        return None
