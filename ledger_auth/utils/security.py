"""
Security utilities for password hashing, validation, and comparison
"""

import enum
import secrets
from dataclasses import dataclass, field
from typing import List
from passlib.context import CryptContext

from ledger_auth.core.config import settings
from ledger_auth.core.exceptions import WeakPassword


PASSWORD_MIN_LENGTH = 8
PASSWORD_SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"


# Password hashing context using bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_BCRYPT_COST
)


class PasswordRule(str, enum.Enum):
    """Password strength rules, in the order they are checked"""
    TOO_SHORT = "too_short"
    MISSING_UPPERCASE = "missing_uppercase"
    MISSING_LOWERCASE = "missing_lowercase"
    MISSING_DIGIT = "missing_digit"
    MISSING_SYMBOL = "missing_symbol"

    @property
    def description(self) -> str:
        return _RULE_DESCRIPTIONS[self]


_RULE_DESCRIPTIONS = {
    PasswordRule.TOO_SHORT: f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
    PasswordRule.MISSING_UPPERCASE: "Password must contain at least one uppercase letter",
    PasswordRule.MISSING_LOWERCASE: "Password must contain at least one lowercase letter",
    PasswordRule.MISSING_DIGIT: "Password must contain at least one digit",
    PasswordRule.MISSING_SYMBOL: f"Password must contain at least one of {PASSWORD_SYMBOLS}",
}


@dataclass
class PasswordPolicyResult:
    violations: List[PasswordRule] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt

    Args:
        password: Plain text password

    Returns:
        Hashed password with the salt and cost embedded
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash

    Args:
        plain_password: Plain text password to verify
        hashed_password: Hashed password to check against

    Returns:
        True if password matches, False otherwise (including unknown or
        empty hashes)
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Not a hash this context recognises
        return False


def validate_password_strength(password: str) -> PasswordPolicyResult:
    """
    Check a password against the strength policy

    Args:
        password: Candidate password

    Returns:
        PasswordPolicyResult listing every unmet rule
    """
    violations = []

    if len(password) < PASSWORD_MIN_LENGTH:
        violations.append(PasswordRule.TOO_SHORT)

    if not any(ch.isupper() for ch in password):
        violations.append(PasswordRule.MISSING_UPPERCASE)

    if not any(ch.islower() for ch in password):
        violations.append(PasswordRule.MISSING_LOWERCASE)

    if not any(ch.isdigit() for ch in password):
        violations.append(PasswordRule.MISSING_DIGIT)

    if not any(ch in PASSWORD_SYMBOLS for ch in password):
        violations.append(PasswordRule.MISSING_SYMBOL)

    return PasswordPolicyResult(violations=violations)


def enforce_password_policy(password: str) -> None:
    """
    Raise WeakPassword if the password violates the strength policy

    Raises:
        WeakPassword: Carrying the unmet rules
    """
    result = validate_password_strength(password)
    if not result.valid:
        raise WeakPassword(result.violations)


def constant_time_compare(a: str, b: str) -> bool:
    """
    Constant-time string comparison to prevent timing attacks

    Args:
        a: First string
        b: Second string

    Returns:
        True if strings are equal, False otherwise
    """
    return secrets.compare_digest(a.encode(), b.encode())
