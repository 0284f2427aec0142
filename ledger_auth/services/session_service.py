"""
Session Service - Signed session token issuance and validation

Sessions are stateless bearer tokens (HMAC-signed JWT). Nothing is stored
server-side; logout is the client discarding the token.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from jose import jwt, JWTError

from ledger_auth.core.config import Settings
from ledger_auth.core.exceptions import Unauthenticated
from ledger_auth.models import User, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionClaim:
    """Identity and role carried by an accepted session token"""
    subject_id: int
    username: str
    role: UserRole
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass(frozen=True)
class IssuedSession:
    token: str
    claim: SessionClaim
    token_type: str = "Bearer"

    @property
    def expires_in(self) -> int:
        return int((self.claim.expires_at - self.claim.issued_at).total_seconds())


class SessionService:
    """Service for session token operations"""

    def __init__(self, settings: Settings, clock: Callable[[], float] = time.time):
        self.algorithm = settings.JWT_ALGORITHM
        self.issuer = settings.JWT_ISSUER
        self.audience = settings.JWT_AUDIENCE
        self.ttl = timedelta(hours=settings.SESSION_TTL_HOURS)
        self._signing_key = settings.JWT_SECRET_KEY
        self._clock = clock

    def issue(self, user: User, issued_at: Optional[datetime] = None) -> IssuedSession:
        """
        Issue a signed session token for a user

        Args:
            user: Authenticated user
            issued_at: Issuance time (defaults to the service clock)

        Returns:
            IssuedSession with the compact token and its claim
        """
        now = issued_at or datetime.fromtimestamp(int(self._clock()), tz=timezone.utc)
        claim = SessionClaim(
            subject_id=user.user_id,
            username=user.username,
            role=UserRole(user.role),
            issued_at=now,
            expires_at=now + self.ttl,
        )

        payload = {
            "iss": self.issuer,
            "aud": self.audience,
            "sub": str(claim.subject_id),
            "username": claim.username,
            "role": claim.role.value,
            "iat": int(claim.issued_at.timestamp()),
            "exp": int(claim.expires_at.timestamp()),
        }

        token = jwt.encode(payload, self._signing_key, algorithm=self.algorithm)
        return IssuedSession(token=token, claim=claim)

    def validate(self, token: str) -> SessionClaim:
        """
        Validate a session token and rebuild its claim

        Args:
            token: Compact JWT

        Returns:
            SessionClaim

        Raises:
            Unauthenticated: For tampered, expired or malformed tokens alike
        """
        try:
            payload = jwt.decode(
                token,
                self._signing_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={"require_exp": True, "require_iat": True, "require_sub": True},
            )
            claim = SessionClaim(
                subject_id=int(payload["sub"]),
                username=str(payload["username"]),
                role=UserRole(payload["role"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (JWTError, KeyError, TypeError, ValueError) as e:
            logger.debug("session token rejected: %s", type(e).__name__)
            raise Unauthenticated()

        if claim.expires_at.timestamp() <= self._clock():
            raise Unauthenticated()

        return claim
