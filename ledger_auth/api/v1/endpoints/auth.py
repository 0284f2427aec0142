"""
Authentication endpoints
"""

from typing import Union
from fastapi import APIRouter, Depends, status

from ledger_auth.api.dependencies import get_auth_service, get_user_service
from ledger_auth.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MfaRequiredResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from ledger_auth.services.auth_service import AuthService
from ledger_auth.services.user_service import UserService


router = APIRouter()


@router.post("/login", response_model=Union[LoginResponse, MfaRequiredResponse])
def login(
    request_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Login with username and password

    **Two-step flow when MFA is enabled:**
    1. POST username/password → `{"requires_mfa": true}` (no token yet)
    2. POST username/password/mfa_code → token

    **Errors:**
    - 401: Invalid username or password (no hint which one)
    - 401: Invalid MFA code
    """
    result = auth_service.login(
        username=request_data.username,
        password=request_data.password,
        mfa_code=request_data.mfa_code
    )

    if result.requires_second_factor:
        return MfaRequiredResponse()

    return LoginResponse(
        token=result.session.token,
        token_type=result.session.token_type,
        expires_in=result.session.expires_in,
        user=UserResponse.model_validate(result.user)
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    request_data: RegisterRequest,
    user_service: UserService = Depends(get_user_service)
):
    """
    Register a new account with the User role

    **Errors:**
    - 400: Username or email already registered
    - 400: Password violates the strength policy (rules listed in details)
    """
    user = user_service.register(
        username=request_data.username,
        email=request_data.email,
        password=request_data.password
    )
    return RegisterResponse(user_id=user.user_id)
