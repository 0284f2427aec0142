"""
Pydantic schemas for MFA (Multi-Factor Authentication) endpoints
"""

from typing import Optional
from pydantic import BaseModel, Field, validator


class MfaSetupResponse(BaseModel):
    """
    MFA setup response

    Contains the TOTP secret and provisioning URI for the authenticator app.
    """
    secret: str = Field(
        ...,
        description="Base32-encoded TOTP secret (display to user for manual entry)"
    )
    provisioning_uri: str = Field(
        ...,
        description="otpauth:// URI to render as a QR code"
    )
    qr_code_data_uri: Optional[str] = Field(
        None,
        description="QR code as data URI (can be embedded in <img> tag)"
    )
    issuer: str
    account_name: str
    message: str = Field(
        default="Scan QR code with authenticator app, then confirm with a 6-digit code"
    )


class MfaCodeRequest(BaseModel):
    """
    Request carrying a TOTP code

    Used to confirm enrollment and to disable MFA.
    """
    code: str = Field(
        ...,
        min_length=6,
        max_length=6,
        description="6-digit TOTP code from authenticator app"
    )

    @validator('code')
    def code_must_be_numeric(cls, v):
        if not v.isdigit():
            raise ValueError('Code must be numeric')
        return v


class MfaStateResponse(BaseModel):
    """MFA enable/disable response"""
    user_id: int
    mfa_enabled: bool
    message: str


class MfaStatusResponse(BaseModel):
    """
    MFA status response

    Returns current MFA configuration status.
    """
    user_id: int
    mfa_enabled: bool
    setup_pending: bool
