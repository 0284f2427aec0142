"""
MFA (Multi-Factor Authentication) endpoints
"""

from fastapi import APIRouter, Depends

from ledger_auth.api.dependencies import get_current_user, get_mfa_service
from ledger_auth.models import User
from ledger_auth.services.mfa_service import MfaService
from ledger_auth.schemas.mfa import (
    MfaSetupResponse,
    MfaCodeRequest,
    MfaStateResponse,
    MfaStatusResponse,
)


router = APIRouter()


@router.get("/status", response_model=MfaStatusResponse)
def mfa_status(
    current_user: User = Depends(get_current_user),
    mfa_service: MfaService = Depends(get_mfa_service)
):
    """Get MFA status for the current user"""
    return MfaStatusResponse(**mfa_service.status(current_user.user_id))


@router.post("/setup", response_model=MfaSetupResponse)
def setup_mfa(
    current_user: User = Depends(get_current_user),
    mfa_service: MfaService = Depends(get_mfa_service)
):
    """
    Start TOTP enrollment

    Returns the secret and an otpauth:// provisioning URI. MFA is not
    enabled until `/mfa/enable` is called with a valid code.

    **Errors:**
    - 409: MFA already enabled (disable it first to re-enroll)
    """
    setup = mfa_service.setup(current_user.user_id)

    return MfaSetupResponse(
        secret=setup.secret,
        provisioning_uri=setup.provisioning_uri,
        qr_code_data_uri=setup.qr_code_data_uri,
        issuer=setup.issuer,
        account_name=setup.account_name
    )


@router.post("/enable", response_model=MfaStateResponse)
def enable_mfa(
    request_data: MfaCodeRequest,
    current_user: User = Depends(get_current_user),
    mfa_service: MfaService = Depends(get_mfa_service)
):
    """
    Confirm enrollment with a code from the authenticator app

    **Errors:**
    - 401: Invalid code
    - 409: No pending enrollment, or MFA already enabled
    """
    state = mfa_service.confirm(current_user.user_id, request_data.code)

    return MfaStateResponse(
        user_id=current_user.user_id,
        mfa_enabled=state.enabled,
        message="MFA enabled successfully"
    )


@router.post("/disable", response_model=MfaStateResponse)
def disable_mfa(
    request_data: MfaCodeRequest,
    current_user: User = Depends(get_current_user),
    mfa_service: MfaService = Depends(get_mfa_service)
):
    """
    Disable MFA; requires a valid current code

    **Errors:**
    - 401: Invalid code
    - 409: MFA is not enabled
    """
    state = mfa_service.disable(current_user.user_id, request_data.code)

    return MfaStateResponse(
        user_id=current_user.user_id,
        mfa_enabled=state.enabled,
        message="MFA disabled successfully"
    )
