"""
User Service - registration, administration and password management
"""

import logging
from typing import List

from ledger_auth.core.config import Settings
from ledger_auth.core.exceptions import IdentityExists, InvalidCredentials
from ledger_auth.models import User, UserRole
from ledger_auth.services.identity_store import IdentityStore
from ledger_auth.utils.security import (
    hash_password,
    verify_password,
    enforce_password_policy
)

logger = logging.getLogger(__name__)


class UserService:
    """Service for user account operations"""

    def __init__(self, store: IdentityStore):
        self.store = store

    def register(self, username: str, email: str, password: str) -> User:
        """Self-service registration, always with the User role"""
        return self.create_user(username, email, password, role=UserRole.USER)

    def create_user(
        self,
        username: str,
        email: str,
        password: str,
        role: UserRole = UserRole.USER
    ) -> User:
        """
        Create a user account

        Args:
            username: Unique username
            email: Unique email
            password: Plain text password, checked against the policy
            role: Admin or User

        Returns:
            Created user

        Raises:
            IdentityExists: If username or email is taken
            WeakPassword: If the password violates the policy
        """
        if self.store.exists(username, email):
            raise IdentityExists()

        enforce_password_policy(password)

        user = self.store.add(User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            role=role,
        ))

        logger.info("user.created user_id=%s role=%s", user.user_id, user.role.value)
        return user

    def get_profile(self, user_id: int) -> User:
        return self.store.get_by_id(user_id)

    def list_users(self) -> List[User]:
        return self.store.list_all()

    def change_password(self, user_id: int, current_password: str, new_password: str) -> User:
        """
        Change a user's own password

        Raises:
            NotFound: If the user does not exist
            InvalidCredentials: If the current password is wrong
            WeakPassword: If the new password violates the policy
        """
        user = self.store.get_by_id(user_id)

        if not verify_password(current_password, user.password_hash):
            raise InvalidCredentials("Current password is incorrect")

        enforce_password_policy(new_password)

        user = self.store.update_password_hash(user_id, hash_password(new_password))
        logger.info("password.changed user_id=%s", user_id)
        return user

    def reset_password(self, user_id: int, new_password: str) -> User:
        """
        Administrator reset of another user's password

        Raises:
            NotFound: If the user does not exist
            WeakPassword: If the new password violates the policy
        """
        self.store.get_by_id(user_id)
        enforce_password_policy(new_password)

        user = self.store.update_password_hash(user_id, hash_password(new_password))
        logger.info("password.reset user_id=%s", user_id)
        return user

    def seed_defaults(self, settings: Settings) -> int:
        """
        Create the default admin and user accounts on an empty database

        Returns:
            Number of accounts created
        """
        if self.store.count():
            return 0

        self.create_user("admin", "admin@example.com", settings.SEED_ADMIN_PASSWORD, role=UserRole.ADMIN)
        self.create_user("user1", "user1@example.com", settings.SEED_USER_PASSWORD, role=UserRole.USER)

        logger.info("Seeded default accounts")
        return 2
