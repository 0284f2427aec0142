"""
Identity store - persistence of credentials and second factor state
"""

from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ledger_auth.core.exceptions import IdentityExists, NotFound
from ledger_auth.models import User, SecondFactorState


class IdentityStore:
    """
    SQLAlchemy repository for User rows

    Every write commits immediately so a later read in the same flow sees it.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def get_by_id(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.user_id == user_id).first()
        if not user:
            raise NotFound("User", user_id)
        return user

    def lock_by_id(self, user_id: int) -> User:
        """
        Re-read a user row with a row lock held until the next commit

        Used to serialize second factor updates for one identity.
        """
        user = (
            self.db.query(User)
            .filter(User.user_id == user_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not user:
            raise NotFound("User", user_id)
        return user

    def exists(self, username: str, email: str) -> bool:
        return self.db.query(User).filter(
            or_(User.username == username, User.email == email)
        ).first() is not None

    def count(self) -> int:
        return self.db.query(User).count()

    def list_all(self) -> List[User]:
        return self.db.query(User).order_by(User.user_id).all()

    def add(self, user: User) -> User:
        """
        Insert a new user

        Raises:
            IdentityExists: If the username or email was taken by a
                concurrent insert after the caller's exists() check
        """
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise IdentityExists()
        self.db.refresh(user)
        return user

    def update_second_factor(self, user_id: int, state: SecondFactorState) -> User:
        """
        Persist second factor state for an identity

        Args:
            user_id: Identity to update
            state: New state; its constructor already enforces that an
                enabled factor has a secret

        Returns:
            Updated user
        """
        user = self.get_by_id(user_id)
        user.mfa_enabled = state.enabled
        user.mfa_secret = state.secret
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_password_hash(self, user_id: int, password_hash: str) -> User:
        user = self.get_by_id(user_id)
        user.password_hash = password_hash
        self.db.commit()
        self.db.refresh(user)
        return user

    def rollback(self) -> None:
        self.db.rollback()
