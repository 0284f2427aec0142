"""
User model
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, Numeric, Text
import enum

from ledger_auth.core.database import Base


class UserRole(str, enum.Enum):
    """User role"""
    ADMIN = "Admin"
    USER = "User"


@dataclass(frozen=True)
class SecondFactorState:
    """
    Second factor enrollment for one identity

    ``secret`` is set once setup has started and cleared on disable;
    ``enabled`` is only ever true while a secret is present.
    """
    enabled: bool = False
    secret: Optional[str] = None

    def __post_init__(self):
        if self.enabled and not self.secret:
            raise ValueError("An enabled second factor requires a secret")

    @property
    def enrolled(self) -> bool:
        return bool(self.secret)


class User(Base):
    """User model - credential, role, wallet and second factor state"""
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)
    wallet_amount = Column(Numeric(18, 2), default=0, nullable=False)
    mfa_enabled = Column(Boolean, default=False, nullable=False)
    mfa_secret = Column(Text, nullable=True)  # Base32 text, never raw bytes
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def second_factor(self) -> SecondFactorState:
        return SecondFactorState(enabled=bool(self.mfa_enabled), secret=self.mfa_secret or None)

    def __repr__(self):
        return f"<User(user_id={self.user_id}, username='{self.username}', role='{self.role}')>"
