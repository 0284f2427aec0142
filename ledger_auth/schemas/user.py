"""
Pydantic schemas for user management endpoints
"""

from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, EmailStr, Field

from ledger_auth.models import UserRole


class CreateUserRequest(BaseModel):
    """Admin user creation request"""
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str
    role: UserRole = UserRole.USER


class CreateUserResponse(BaseModel):
    user_id: int
    message: str = "User created successfully"


class ChangePasswordRequest(BaseModel):
    """Password change by the account owner"""
    current_password: str
    new_password: str


class ResetPasswordRequest(BaseModel):
    """Password reset by an administrator"""
    new_password: str


class MessageResponse(BaseModel):
    message: str


class UserListItem(BaseModel):
    user_id: int
    username: str
    email: str
    role: UserRole
    wallet_amount: Decimal
    mfa_enabled: bool
    created_at: datetime

    class Config:
        from_attributes = True
