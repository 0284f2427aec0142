"""
API v1 endpoints
"""

from . import auth, mfa, users

__all__ = ["auth", "mfa", "users"]
