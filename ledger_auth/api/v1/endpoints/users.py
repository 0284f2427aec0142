"""
User profile and administration endpoints
"""

from typing import List
from fastapi import APIRouter, Depends, status

from ledger_auth.api.dependencies import get_current_user, get_admin_user, get_user_service
from ledger_auth.models import User
from ledger_auth.schemas.auth import UserResponse
from ledger_auth.schemas.user import (
    ChangePasswordRequest,
    CreateUserRequest,
    CreateUserResponse,
    MessageResponse,
    ResetPasswordRequest,
    UserListItem,
)
from ledger_auth.services.user_service import UserService


router = APIRouter()


@router.get("/profile", response_model=UserResponse)
def get_profile(
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """Get the current user's profile including wallet balance"""
    return user_service.get_profile(current_user.user_id)


@router.post("/create", response_model=CreateUserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    request_data: CreateUserRequest,
    admin: User = Depends(get_admin_user),
    user_service: UserService = Depends(get_user_service)
):
    """Create a user with any role (Admin only)"""
    user = user_service.create_user(
        username=request_data.username,
        email=request_data.email,
        password=request_data.password,
        role=request_data.role
    )
    return CreateUserResponse(user_id=user.user_id)


@router.get("/all", response_model=List[UserListItem])
def list_users(
    admin: User = Depends(get_admin_user),
    user_service: UserService = Depends(get_user_service)
):
    """List all users (Admin only)"""
    return user_service.list_users()


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    request_data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """
    Change the current user's password

    **Errors:**
    - 401: Current password is incorrect
    - 400: New password violates the strength policy
    """
    user_service.change_password(
        current_user.user_id,
        request_data.current_password,
        request_data.new_password
    )
    return MessageResponse(message="Password changed successfully")


@router.post("/{user_id}/reset-password", response_model=MessageResponse)
def reset_password(
    user_id: int,
    request_data: ResetPasswordRequest,
    admin: User = Depends(get_admin_user),
    user_service: UserService = Depends(get_user_service)
):
    """
    Reset another user's password (Admin only)

    **Errors:**
    - 404: User not found
    - 400: New password violates the strength policy
    """
    user_service.reset_password(user_id, request_data.new_password)
    return MessageResponse(message="Password reset successfully")
