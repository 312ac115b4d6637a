"""
Talent Portal API Client

Thin httpx wrapper around the /api routes that keeps a SessionStore in
sync: login/register store the returned token, logout clears it, and
every request carries ``Authorization: Bearer <token>`` when one is held.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import httpx

from talent_portal.client.session_cache import SessionStore

logger = logging.getLogger(__name__)

VALIDATION_COOLDOWN = 5.0  # seconds between server round-trips in validate_stored_session


class PortalAPIError(Exception):
    """Non-2xx response from the API, carrying the envelope's message and field errors."""

    def __init__(self, status_code: int, message: str, errors: Optional[List[dict]] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or []


class PortalClient:
    """
    Wrapper for the Talent Portal API with a local session cache.

    Args:
        base_url: server root, e.g. "http://localhost:8000/api"
        session_store: where the token/user snapshot is kept
        transport: optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        session_store: Optional[SessionStore] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.sessions = session_store or SessionStore()
        self.http = httpx.Client(base_url=base_url, transport=transport, timeout=timeout)
        self.clock = clock
        # validation state belongs to this client, not the module
        self._validating = False
        self._last_validation: Optional[float] = None

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "PortalClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------- transport --------------------

    def _request(self, method: str, path: str, json: Optional[dict] = None) -> Dict[str, Any]:
        headers = {}
        token = self.sessions.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        response = self.http.request(method, path, json=json, headers=headers)
        try:
            body = response.json()
        except ValueError:
            body = {"success": False, "message": response.text}

        if response.is_error:
            raise PortalAPIError(response.status_code, body.get("message", ""), body.get("errors"))
        return body

    def _store_auth(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if body.get("success") and body.get("token") and body.get("user"):
            self.sessions.set_session(body["token"], body["user"])
        return body

    # -------------------- auth --------------------

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._store_auth(self._request("POST", "/auth/register", json=data))

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._store_auth(
            self._request("POST", "/auth/login", json={"email": email, "password": password})
        )

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me")

    def logout(self) -> None:
        self.sessions.clear()

    @property
    def is_authenticated(self) -> bool:
        return self.sessions.token is not None

    # -------------------- profile --------------------

    def get_profile(self) -> Dict[str, Any]:
        return self._request("GET", "/profile")

    def update_profile(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        body = self._request("PUT", "/profile", json=changes)
        if body.get("data"):
            self.sessions.update_user(body["data"])
        return body

    def delete_profile(self) -> Dict[str, Any]:
        return self._request("DELETE", "/profile")

    # -------------------- session validation --------------------

    def validate_stored_session(self) -> bool:
        """
        Check the cached session against the server.

        Returns False (and clears the cache) when there is no session or the
        server rejects it with 401/404. Server errors and network failures
        keep the session so a later call can retry. Calls made while a check
        is running, or within VALIDATION_COOLDOWN of the last one, trust the
        cache without a round-trip.
        """
        if self.sessions.get_session() is None:
            return False

        if self._validating:
            return True
        now = self.clock()
        if self._last_validation is not None and now - self._last_validation < VALIDATION_COOLDOWN:
            return True

        self._validating = True
        self._last_validation = now
        try:
            body = self.me()
        except PortalAPIError as e:
            if e.status_code in (401, 404):
                logger.info("Stored session rejected (%s), clearing", e.status_code)
                self.sessions.clear()
                return False
            if e.status_code >= 500:
                logger.warning("Server error during session validation, keeping session for retry")
                return True
            self.sessions.clear()
            return False
        except httpx.TransportError as e:
            logger.warning("Network error during session validation, keeping session: %s", e)
            return True
        finally:
            self._validating = False

        if body.get("success") and body.get("user"):
            self.sessions.update_user(body["user"])
            self.sessions.refresh()
            return True
        return False
