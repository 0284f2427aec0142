"""
Database models
"""

from ledger_auth.models.user import User, UserRole, SecondFactorState

__all__ = [
    "User",
    "UserRole",
    "SecondFactorState",
]
