"""
Client-side session cache.

Keeps the last issued token and user snapshot together with a
client-enforced expiry. This only saves the user from re-typing
credentials: the server never trusts it and re-verifies the token on
every request.
"""

import json
import logging
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TIMEOUT = 24 * 60 * 60  # seconds


@dataclass(frozen=True)
class SessionData:
    user: Optional[dict]
    token: str
    expires_at: float
    created_at: float

    def to_json(self) -> dict:
        return {
            "user": self.user,
            "token": self.token,
            "expiresAt": self.expires_at,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_json(cls, data: dict) -> "SessionData":
        return cls(
            user=data.get("user"),
            token=data["token"],
            expires_at=float(data["expiresAt"]),
            created_at=float(data["createdAt"]),
        )


class SessionStore:
    """
    Persists one SessionData, in memory or as a JSON file.

    Args:
        path: JSON file to persist to; None keeps the session in memory only
        timeout: seconds a session stays valid after being set or refreshed
        clock: returns the current time in seconds
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        timeout: float = DEFAULT_SESSION_TIMEOUT,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path).expanduser() if path else None
        self.timeout = timeout
        self.clock = clock
        self._memory: Optional[dict] = None

    # -------------------- raw storage --------------------

    def _read(self) -> Optional[dict]:
        if self.path is None:
            return self._memory
        if not self.path.exists():
            return None
        return json.loads(self.path.read_text(encoding="utf-8"))

    def _write(self, session: SessionData) -> None:
        data = session.to_json()
        if self.path is None:
            self._memory = data
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    # -------------------- public API --------------------

    def set_session(self, token: str, user: Optional[dict]) -> SessionData:
        now = self.clock()
        session = SessionData(user=user, token=token, expires_at=now + self.timeout, created_at=now)
        self._write(session)
        return session

    def get_session(self) -> Optional[SessionData]:
        """The stored session, or None if absent, expired or unreadable (which also clears it)."""
        try:
            data = self._read()
            if data is None:
                return None
            session = SessionData.from_json(data)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable session data: %s", e)
            self.clear()
            return None

        if self.clock() > session.expires_at:
            self.clear()
            return None
        return session

    def clear(self) -> None:
        self._memory = None
        if self.path is not None and self.path.exists():
            self.path.unlink()

    def is_expired(self) -> bool:
        return self.get_session() is None

    def refresh(self) -> None:
        """Push the expiry out by a full timeout from now."""
        session = self.get_session()
        if session:
            self._write(replace(session, expires_at=self.clock() + self.timeout))

    def update_user(self, user: dict) -> None:
        session = self.get_session()
        if session:
            self._write(replace(session, user=user))

    @property
    def token(self) -> Optional[str]:
        session = self.get_session()
        return session.token if session else None

    @property
    def user(self) -> Optional[dict]:
        session = self.get_session()
        return session.user if session else None

    def remaining(self) -> float:
        """Seconds until the stored session expires (0 when there is none)."""
        session = self.get_session()
        if session is None:
            return 0.0
        return max(0.0, session.expires_at - self.clock())
