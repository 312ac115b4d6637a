"""
Session Service - JWT issuance and verification.

Tokens are stateless: nothing is stored server-side and there is no
refresh or revocation. A token is accepted only when
  1. its signature checks out with the process-wide key,
  2. the current time is before exp, and
  3. the user it names still exists in the credential store.
Every failure collapses into the same AuthenticationFailed.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt

from talent_portal.core.config import Settings
from talent_portal.core.exceptions import AuthenticationFailed
from talent_portal.services.user_service import CredentialStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionIssuer:
    """Mints and checks bearer tokens for verified identities."""

    def __init__(self, settings: Settings, store: CredentialStore, clock: Optional[Clock] = None):
        self.secret_key = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.lifetime = timedelta(minutes=settings.jwt_expire_minutes)
        self.store = store
        self.clock = clock or _utcnow

    def issue(self, user: dict) -> str:
        """Create a signed token for ``user`` (a stored user document)."""
        issued_at = self.clock()
        claims = {
            "sub": str(user["_id"]),
            "email": user["email"],
            "iat": int(issued_at.timestamp()),
            # NumericDate may carry a fraction; keep the exact sub-second expiry
            "exp": (issued_at + self.lifetime).timestamp(),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> Optional[dict]:
        """
        Signature and expiry check only. Returns the claims, or None.

        Expiry is checked here against ``self.clock`` rather than by the JWT
        library so the boundary is exact: valid for now < exp.
        """
        if not token:
            return None
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError:
            return None

        exp, sub = claims.get("exp"), claims.get("sub")
        if not isinstance(exp, (int, float)) or not sub:
            return None
        try:
            # compare as datetimes so the microsecond boundary survives float rounding
            expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
        if self.clock() >= expires_at:
            return None
        return claims

    def verify(self, token: str) -> dict:
        """
        Resolve a token to the current user document.

        Raises AuthenticationFailed for a malformed, tampered or expired
        token, and for a valid token whose user no longer exists.
        """
        claims = self.decode(token)
        if claims is None:
            raise AuthenticationFailed()

        user = self.store.find_by_id(claims["sub"])
        if user is None:
            logger.info("Rejected token for unknown user %s", claims["sub"])
            raise AuthenticationFailed()
        return user
