"""
Pydantic schemas for authentication endpoints
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, validator

from ledger_auth.models import UserRole


# Request schemas

class LoginRequest(BaseModel):
    """User login request"""
    username: str = Field(..., min_length=1, max_length=100)
    password: str
    mfa_code: Optional[str] = Field(None, max_length=10)

    @validator('mfa_code')
    def blank_code_is_missing(cls, v):
        if v is not None and not v.strip():
            return None
        return v


class RegisterRequest(BaseModel):
    """User registration request"""
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str


# Response schemas

class UserResponse(BaseModel):
    """User information in response"""
    user_id: int
    username: str
    email: str
    role: UserRole
    wallet_amount: Decimal
    mfa_enabled: bool

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Login response with session token"""
    token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserResponse
    requires_mfa: bool = False


class MfaRequiredResponse(BaseModel):
    """Second factor required - re-submit the login with mfa_code"""
    requires_mfa: bool = True
    message: str = "MFA verification required"


class RegisterResponse(BaseModel):
    """Registration response"""
    user_id: int
    message: str = "User created successfully"
