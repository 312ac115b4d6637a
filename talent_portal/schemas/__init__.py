"""
Schemas module - Request/Response schemas for API endpoints.

Schemas are the API contract (what client sends/receives); the stored
MongoDB document uses the same camelCase keys.
"""

from talent_portal.schemas.schemas import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    ProfileUpdate,
    RegisterRequest,
    UserResponse,
)

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "ProfileResponse",
    "ProfileUpdate",
    "RegisterRequest",
    "UserResponse",
]
