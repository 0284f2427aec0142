"""
API dependencies for authentication and authorization
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ledger_auth.core.config import Settings, get_settings
from ledger_auth.core.database import get_db
from ledger_auth.core.exceptions import Forbidden, NotFound, Unauthenticated
from ledger_auth.models import User, UserRole
from ledger_auth.services.auth_service import AuthService
from ledger_auth.services.identity_store import IdentityStore
from ledger_auth.services.mfa_service import MfaService
from ledger_auth.services.session_service import SessionService, SessionClaim
from ledger_auth.services.user_service import UserService


# Security scheme
security = HTTPBearer(auto_error=False)


def get_identity_store(db: Session = Depends(get_db)) -> IdentityStore:
    return IdentityStore(db)


def get_session_service(settings: Settings = Depends(get_settings)) -> SessionService:
    return SessionService(settings)


def get_auth_service(
    store: IdentityStore = Depends(get_identity_store),
    settings: Settings = Depends(get_settings),
    session_service: SessionService = Depends(get_session_service)
) -> AuthService:
    """
    Get authentication service instance

    Args:
        store: Identity store bound to the request's database session
        settings: Application settings
        session_service: Session token service

    Returns:
        AuthService instance
    """
    return AuthService(store, settings, session_service=session_service)


def get_mfa_service(
    store: IdentityStore = Depends(get_identity_store),
    settings: Settings = Depends(get_settings)
) -> MfaService:
    return MfaService(store, settings)


def get_user_service(store: IdentityStore = Depends(get_identity_store)) -> UserService:
    return UserService(store)


def get_current_claim(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session_service: SessionService = Depends(get_session_service)
) -> SessionClaim:
    """
    Validate the bearer token from the Authorization header

    Raises:
        Unauthenticated: If the token is missing, tampered or expired
    """
    if not credentials:
        raise Unauthenticated("Missing authentication credentials")

    return session_service.validate(credentials.credentials)


def get_current_user(
    claim: SessionClaim = Depends(get_current_claim),
    store: IdentityStore = Depends(get_identity_store)
) -> User:
    """
    Get current authenticated user from the session claim

    Raises:
        Unauthenticated: If the identity in the token no longer exists
    """
    try:
        return store.get_by_id(claim.subject_id)
    except NotFound:
        raise Unauthenticated()


def require_role(required_role: UserRole):
    """
    Dependency factory to require a specific role

    Args:
        required_role: Role required

    Returns:
        Dependency function that checks the current user's role
    """
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != required_role:
            raise Forbidden(f"Role '{required_role.value}' required")
        return current_user

    return role_checker


get_admin_user = require_role(UserRole.ADMIN)
