"""
Authentication Service - Login flow with optional TOTP second factor

    AWAITING_CREDENTIALS -> CREDENTIALS_VERIFIED
        -> SECOND_FACTOR_NOT_CONFIGURED ------------------> SESSION_ISSUED
        -> SECOND_FACTOR_REQUIRED (halt, caller re-submits with a code)
        -> SECOND_FACTOR_VERIFIED ------------------------> SESSION_ISSUED

Any step may end in REJECTED.
"""

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ledger_auth.core.config import Settings
from ledger_auth.core.exceptions import (
    InvalidCredentials,
    InvalidSecondFactorCode,
    InvalidStateTransition,
)
from ledger_auth.models import User
from ledger_auth.services import totp
from ledger_auth.services.identity_store import IdentityStore
from ledger_auth.services.session_service import SessionService, IssuedSession
from ledger_auth.utils.security import verify_password

logger = logging.getLogger(__name__)


class AuthState(str, enum.Enum):
    AWAITING_CREDENTIALS = "awaiting_credentials"
    CREDENTIALS_VERIFIED = "credentials_verified"
    SECOND_FACTOR_REQUIRED = "second_factor_required"
    SECOND_FACTOR_VERIFIED = "second_factor_verified"
    SECOND_FACTOR_NOT_CONFIGURED = "second_factor_not_configured"
    SESSION_ISSUED = "session_issued"
    REJECTED = "rejected"


_TRANSITIONS = {
    AuthState.AWAITING_CREDENTIALS: {AuthState.CREDENTIALS_VERIFIED},
    AuthState.CREDENTIALS_VERIFIED: {
        AuthState.SECOND_FACTOR_REQUIRED,
        AuthState.SECOND_FACTOR_VERIFIED,
        AuthState.SECOND_FACTOR_NOT_CONFIGURED,
    },
    AuthState.SECOND_FACTOR_VERIFIED: {AuthState.SESSION_ISSUED},
    AuthState.SECOND_FACTOR_NOT_CONFIGURED: {AuthState.SESSION_ISSUED},
    AuthState.SECOND_FACTOR_REQUIRED: set(),
    AuthState.SESSION_ISSUED: set(),
    AuthState.REJECTED: set(),
}

_TERMINAL = {AuthState.SECOND_FACTOR_REQUIRED, AuthState.SESSION_ISSUED, AuthState.REJECTED}


@dataclass
class LoginFlow:
    """State of a single login attempt"""
    state: AuthState = AuthState.AWAITING_CREDENTIALS
    history: List[AuthState] = field(default_factory=lambda: [AuthState.AWAITING_CREDENTIALS])

    def advance(self, new_state: AuthState) -> None:
        if new_state == AuthState.REJECTED and self.state not in _TERMINAL:
            allowed = True
        else:
            allowed = new_state in _TRANSITIONS[self.state]
        if not allowed:
            raise InvalidStateTransition(f"Cannot move from {self.state.value} to {new_state.value}")
        self.state = new_state
        self.history.append(new_state)


@dataclass
class LoginResult:
    """
    Outcome of a login that was not rejected

    ``session`` is None when ``state`` is SECOND_FACTOR_REQUIRED.
    """
    state: AuthState
    user: User
    flow: LoginFlow
    session: Optional[IssuedSession] = None

    @property
    def requires_second_factor(self) -> bool:
        return self.state == AuthState.SECOND_FACTOR_REQUIRED


class AuthService:
    """Service for authentication operations"""

    def __init__(
        self,
        store: IdentityStore,
        settings: Settings,
        session_service: Optional[SessionService] = None,
        clock: Callable[[], float] = time.time
    ):
        self.store = store
        self.settings = settings
        self.clock = clock
        self.session_service = session_service or SessionService(settings, clock=clock)

    def login(
        self,
        username: str,
        password: str,
        mfa_code: Optional[str] = None
    ) -> LoginResult:
        """
        Authenticate a user with password and, when enrolled, a TOTP code

        Args:
            username: Username
            password: Plain text password
            mfa_code: Six digit code from the authenticator app, if any

        Returns:
            LoginResult in state SESSION_ISSUED or SECOND_FACTOR_REQUIRED

        Raises:
            InvalidCredentials: Unknown user or wrong password
            InvalidSecondFactorCode: A code was supplied and did not verify
        """
        flow = LoginFlow()

        user = self.store.find_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            flow.advance(AuthState.REJECTED)
            logger.warning("login.failed reason=invalid_credentials")
            raise InvalidCredentials()

        flow.advance(AuthState.CREDENTIALS_VERIFIED)

        second_factor = user.second_factor
        if not second_factor.enabled:
            flow.advance(AuthState.SECOND_FACTOR_NOT_CONFIGURED)
        elif not mfa_code:
            flow.advance(AuthState.SECOND_FACTOR_REQUIRED)
            logger.info("login.mfa_required user_id=%s", user.user_id)
            return LoginResult(state=flow.state, user=user, flow=flow)
        elif totp.verify_code(second_factor.secret, mfa_code, now=self.clock()):
            flow.advance(AuthState.SECOND_FACTOR_VERIFIED)
        else:
            flow.advance(AuthState.REJECTED)
            logger.warning("login.failed reason=invalid_mfa_code user_id=%s", user.user_id)
            raise InvalidSecondFactorCode()

        session = self.session_service.issue(user)
        flow.advance(AuthState.SESSION_ISSUED)
        logger.info(
            "login.success user_id=%s role=%s mfa=%s",
            user.user_id,
            session.claim.role.value,
            second_factor.enabled
        )

        return LoginResult(state=flow.state, user=user, flow=flow, session=session)
