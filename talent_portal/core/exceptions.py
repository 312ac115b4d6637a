"""
Domain errors raised by services and dependencies.

Each error knows its HTTP status; the handlers in ``talent_portal.main``
turn them into the standard response envelope.
"""

from dataclasses import dataclass, asdict
from typing import List, Optional


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


class PortalError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationFailed(PortalError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: List[FieldError], message: Optional[str] = None):
        super().__init__(message)
        self.errors = list(errors)


class AuthenticationFailed(PortalError):
    # same message for expired, tampered and unknown-user tokens
    status_code = 401
    message = "Token is not valid."


class InvalidCredentials(AuthenticationFailed):
    message = "Invalid email or password"


class DuplicateEmailError(PortalError):
    status_code = 409
    message = "User with this email already exists"


class UserNotFound(PortalError):
    status_code = 404
    message = "User not found"


class RateLimitExceeded(PortalError):
    status_code = 429
    message = "Too many requests. Please try again later."

    def __init__(self, retry_after: int):
        super().__init__()
        self.retry_after = retry_after
