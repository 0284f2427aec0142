"""
Unit tests for MFA enrollment
"""

import pytest

from ledger_auth.core.exceptions import AlreadyEnrolled, NotEnrolled, NotFound, InvalidSecondFactorCode
from ledger_auth.models import SecondFactorState
from ledger_auth.services import totp
from ledger_auth.services.mfa_service import MfaService


@pytest.fixture
def mfa_service(store, test_settings, clock):
    return MfaService(store, test_settings, clock=clock)


@pytest.fixture
def alice(make_user):
    return make_user("alice")


def wrong_code(secret, now):
    window = {totp.current_code(secret, now=now + d * 30) for d in (-1, 0, 1)}
    return next(c for c in ("000000", "111111", "222222", "333333") if c not in window)


class TestSetup:
    """Test enrollment start"""

    def test_setup_stores_pending_secret(self, mfa_service, store, alice):
        setup = mfa_service.setup(alice.user_id)

        user = store.get_by_id(alice.user_id)
        assert user.mfa_secret == setup.secret
        assert user.mfa_enabled is False
        assert len(setup.secret) == 32

    def test_setup_returns_provisioning_uri(self, mfa_service, alice):
        setup = mfa_service.setup(alice.user_id)

        assert setup.provisioning_uri == (
            f"otpauth://totp/SaralLedger:alice?secret={setup.secret}&issuer=SaralLedger"
        )
        assert setup.issuer == "SaralLedger"
        assert setup.account_name == "alice"
        assert setup.qr_code_data_uri is None

    def test_setup_again_replaces_pending_secret(self, mfa_service, store, alice):
        first = mfa_service.setup(alice.user_id)
        second = mfa_service.setup(alice.user_id)

        assert first.secret != second.secret
        assert store.get_by_id(alice.user_id).mfa_secret == second.secret

    def test_setup_when_enabled_rejected(self, mfa_service, store, make_user):
        user = make_user("carol", mfa_secret="JBSWY3DPEHPK3PXP", mfa_enabled=True)

        with pytest.raises(AlreadyEnrolled):
            mfa_service.setup(user.user_id)

        assert store.get_by_id(user.user_id).mfa_secret == "JBSWY3DPEHPK3PXP"

    def test_setup_unknown_user(self, mfa_service):
        with pytest.raises(NotFound):
            mfa_service.setup(999)

    def test_qr_code_when_enabled(self, store, test_settings, clock, alice):
        service = MfaService(
            store,
            test_settings.model_copy(update={"MFA_QR_CODE_ENABLED": True}),
            clock=clock
        )

        setup = service.setup(alice.user_id)

        assert setup.qr_code_data_uri.startswith("data:image/png;base64,")


class TestConfirm:
    """Test enrollment confirmation"""

    def test_correct_code_enables(self, mfa_service, store, clock, alice):
        setup = mfa_service.setup(alice.user_id)

        state = mfa_service.confirm(alice.user_id, totp.current_code(setup.secret, now=clock()))

        assert state == SecondFactorState(enabled=True, secret=setup.secret)
        assert store.get_by_id(alice.user_id).mfa_enabled is True

    def test_wrong_code_leaves_disabled(self, mfa_service, store, clock, alice):
        setup = mfa_service.setup(alice.user_id)

        with pytest.raises(InvalidSecondFactorCode):
            mfa_service.confirm(alice.user_id, wrong_code(setup.secret, clock()))

        user = store.get_by_id(alice.user_id)
        assert user.mfa_enabled is False
        assert user.mfa_secret == setup.secret

    def test_stale_code_rejected(self, mfa_service, store, clock, alice):
        setup = mfa_service.setup(alice.user_id)
        code = totp.current_code(setup.secret, now=clock())

        clock.advance(90)

        with pytest.raises(InvalidSecondFactorCode):
            mfa_service.confirm(alice.user_id, code)
        assert store.get_by_id(alice.user_id).mfa_enabled is False

    def test_confirm_without_setup(self, mfa_service, alice):
        with pytest.raises(NotEnrolled):
            mfa_service.confirm(alice.user_id, "123456")

    def test_confirm_when_already_enabled(self, mfa_service, clock, make_user):
        user = make_user("carol", mfa_secret="JBSWY3DPEHPK3PXP", mfa_enabled=True)

        with pytest.raises(AlreadyEnrolled):
            mfa_service.confirm(user.user_id, totp.current_code("JBSWY3DPEHPK3PXP", now=clock()))


class TestDisable:
    """Test disabling the second factor"""

    SECRET = "JBSWY3DPEHPK3PXP"

    def test_correct_code_clears_state(self, mfa_service, store, clock, make_user):
        user = make_user("carol", mfa_secret=self.SECRET, mfa_enabled=True)

        state = mfa_service.disable(user.user_id, totp.current_code(self.SECRET, now=clock()))

        assert state == SecondFactorState()
        user = store.get_by_id(user.user_id)
        assert user.mfa_enabled is False
        assert user.mfa_secret is None

    def test_stale_code_leaves_state(self, mfa_service, store, clock, make_user):
        user = make_user("carol", mfa_secret=self.SECRET, mfa_enabled=True)
        code = totp.current_code(self.SECRET, now=clock())

        clock.advance(120)

        with pytest.raises(InvalidSecondFactorCode):
            mfa_service.disable(user.user_id, code)

        user = store.get_by_id(user.user_id)
        assert user.mfa_enabled is True
        assert user.mfa_secret == self.SECRET

    def test_disable_without_secret(self, mfa_service, alice):
        with pytest.raises(NotEnrolled):
            mfa_service.disable(alice.user_id, "123456")

    def test_disable_cancels_pending_setup(self, mfa_service, store, clock, alice):
        setup = mfa_service.setup(alice.user_id)

        mfa_service.disable(alice.user_id, totp.current_code(setup.secret, now=clock()))

        assert store.get_by_id(alice.user_id).mfa_secret is None


class TestStatus:

    def test_not_configured(self, mfa_service, alice):
        assert mfa_service.status(alice.user_id) == {
            "user_id": alice.user_id,
            "mfa_enabled": False,
            "setup_pending": False,
        }

    def test_pending(self, mfa_service, alice):
        mfa_service.setup(alice.user_id)
        status = mfa_service.status(alice.user_id)
        assert status["setup_pending"] is True
        assert status["mfa_enabled"] is False

    def test_enabled(self, mfa_service, make_user):
        user = make_user("carol", mfa_secret="JBSWY3DPEHPK3PXP", mfa_enabled=True)
        status = mfa_service.status(user.user_id)
        assert status["mfa_enabled"] is True
        assert status["setup_pending"] is False
        assert "secret" not in status
