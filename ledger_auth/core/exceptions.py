"""
Authentication exceptions

Typed outcomes raised by the authentication core. The API layer maps each
class to a transport status through ``status_code``; the core itself never
builds HTTP responses.
"""

from typing import Any, Dict, List, Optional


class AuthError(Exception):
    """Base exception for all authentication core errors."""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            'error': self.__class__.__name__,
            'code': self.code,
            'message': self.message,
            'details': self.details
        }


class InvalidCredentials(AuthError):
    """
    Raised when a username/password pair does not authenticate.

    Unknown usernames and wrong passwords share this message so callers
    cannot enumerate accounts.
    """

    status_code = 401

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class InvalidSecondFactorCode(AuthError):
    """Raised when a TOTP code is wrong or outside the accepted window."""

    status_code = 401

    def __init__(self, message: str = "Invalid MFA code"):
        super().__init__(message, code="INVALID_MFA_CODE")


class AlreadyEnrolled(AuthError):
    status_code = 409

    def __init__(self, message: str = "MFA is already enabled. Disable it first to re-enroll."):
        super().__init__(message, code="MFA_ALREADY_ENABLED")


class NotEnrolled(AuthError):
    status_code = 409

    def __init__(self, message: str = "No MFA enrollment found. Please set up MFA first."):
        super().__init__(message, code="MFA_NOT_ENROLLED")


class WeakPassword(AuthError):
    """
    Raised when a new password violates the strength policy.

    Attributes:
        rules (list): The unmet ``PasswordRule`` members
    """

    status_code = 400

    def __init__(self, rules: List[Any]):
        self.rules = list(rules)
        super().__init__(
            "Password does not meet the strength policy",
            code="WEAK_PASSWORD",
            details={
                'rules': [rule.value for rule in self.rules],
                'messages': [rule.description for rule in self.rules]
            }
        )


class NotFound(AuthError):
    status_code = 404

    def __init__(self, resource: str = "User", identifier: Any = None):
        message = f"{resource} not found" if identifier is None else f"{resource} '{identifier}' not found"
        super().__init__(message, code="NOT_FOUND")


class IdentityExists(AuthError):
    status_code = 400

    def __init__(self, message: str = "User already exists"):
        super().__init__(message, code="USER_EXISTS")


class Unauthenticated(AuthError):
    """
    Raised for any session token that cannot be accepted.

    Tampered, expired and malformed tokens all surface as this one outcome.
    """

    status_code = 401

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, code="UNAUTHENTICATED")


class Forbidden(AuthError):
    status_code = 403

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, code="FORBIDDEN")


class InvalidStateTransition(RuntimeError):
    """Programming error: the login flow was advanced out of order."""
    pass
