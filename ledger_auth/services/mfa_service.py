"""
MFA Service - TOTP second factor enrollment

setup -> confirm -> (login with codes) -> disable
"""

import base64
import io
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional
import qrcode

from ledger_auth.core.config import Settings
from ledger_auth.core.exceptions import AlreadyEnrolled, NotEnrolled, InvalidSecondFactorCode
from ledger_auth.models import SecondFactorState
from ledger_auth.services import totp
from ledger_auth.services.identity_store import IdentityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MfaSetup:
    secret: str
    provisioning_uri: str
    issuer: str
    account_name: str
    qr_code_data_uri: Optional[str] = None


class MfaService:
    """Service for MFA/TOTP enrollment"""

    def __init__(
        self,
        store: IdentityStore,
        settings: Settings,
        clock: Callable[[], float] = time.time
    ):
        self.store = store
        self.settings = settings
        self.clock = clock

    def setup(self, user_id: int) -> MfaSetup:
        """
        Start TOTP enrollment

        Generates and stores a new secret. MFA stays disabled until confirm.
        Calling setup again before confirming replaces the pending secret.

        Args:
            user_id: Identity to enroll

        Returns:
            MfaSetup with the secret and provisioning URI

        Raises:
            AlreadyEnrolled: If MFA is already enabled
        """
        user = self.store.lock_by_id(user_id)
        if user.mfa_enabled:
            self.store.rollback()
            raise AlreadyEnrolled()

        secret = totp.generate_secret()
        uri = totp.provisioning_uri(self.settings.MFA_ISSUER, user.username, secret)

        self.store.update_second_factor(user_id, SecondFactorState(enabled=False, secret=secret))
        logger.info("mfa.setup_started user_id=%s", user_id)

        return MfaSetup(
            secret=secret,
            provisioning_uri=uri,
            issuer=self.settings.MFA_ISSUER,
            account_name=user.username,
            qr_code_data_uri=self._generate_qr_code(uri) if self.settings.MFA_QR_CODE_ENABLED else None,
        )

    def _generate_qr_code(self, data: str) -> str:
        """
        Generate QR code as data URI

        Args:
            data: Data to encode in QR code

        Returns:
            QR code as data URI (can be used in <img src="">)
        """
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=4,
        )
        qr.add_data(data)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format='PNG')
        buffer.seek(0)

        img_base64 = base64.b64encode(buffer.read()).decode()
        return f"data:image/png;base64,{img_base64}"

    def confirm(self, user_id: int, code: str) -> SecondFactorState:
        """
        Confirm TOTP enrollment

        Args:
            user_id: Identity being enrolled
            code: Code from the authenticator app

        Returns:
            The enabled SecondFactorState

        Raises:
            NotEnrolled: If setup was never run
            AlreadyEnrolled: If MFA is already enabled
            InvalidSecondFactorCode: If the code does not verify (state unchanged)
        """
        user = self.store.lock_by_id(user_id)
        state = user.second_factor

        if not state.enrolled:
            self.store.rollback()
            raise NotEnrolled()

        if state.enabled:
            self.store.rollback()
            raise AlreadyEnrolled("MFA is already enabled")

        if not totp.verify_code(state.secret, code, now=self.clock()):
            self.store.rollback()
            logger.warning("mfa.confirm_failed user_id=%s", user_id)
            raise InvalidSecondFactorCode("Invalid verification code")

        updated = self.store.update_second_factor(
            user_id, SecondFactorState(enabled=True, secret=state.secret)
        )
        logger.info("mfa.enabled user_id=%s", user_id)
        return updated.second_factor

    def disable(self, user_id: int, code: str) -> SecondFactorState:
        """
        Disable TOTP for a user

        Requires a valid current code. Clears the secret.

        Raises:
            NotEnrolled: If there is no secret to disable
            InvalidSecondFactorCode: If the code does not verify (state unchanged)
        """
        user = self.store.lock_by_id(user_id)
        state = user.second_factor

        if not state.enrolled:
            self.store.rollback()
            raise NotEnrolled("MFA is not enabled")

        if not totp.verify_code(state.secret, code, now=self.clock()):
            self.store.rollback()
            logger.warning("mfa.disable_failed user_id=%s", user_id)
            raise InvalidSecondFactorCode("Invalid verification code")

        updated = self.store.update_second_factor(user_id, SecondFactorState())
        logger.info("mfa.disabled user_id=%s", user_id)
        return updated.second_factor

    def status(self, user_id: int) -> dict:
        """
        Get MFA status for user

        Returns:
            Dictionary with MFA status information (never the secret)
        """
        state = self.store.get_by_id(user_id).second_factor
        return {
            "user_id": user_id,
            "mfa_enabled": state.enabled,
            "setup_pending": state.enrolled and not state.enabled,
        }
