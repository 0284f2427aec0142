"""
Unit tests for user accounts and the identity store
"""

import pytest

from ledger_auth.core.exceptions import IdentityExists, InvalidCredentials, NotFound, WeakPassword
from ledger_auth.models import SecondFactorState, UserRole
from ledger_auth.services.user_service import UserService
from ledger_auth.utils.security import verify_password


TEST_PASSWORD = "Correct-Horse1"


@pytest.fixture
def user_service(store):
    return UserService(store)


class TestCreateUser:
    """Test account creation"""

    def test_register_creates_user_role(self, user_service):
        user = user_service.register("alice", "alice@example.com", "Str0ng!pass")

        assert user.user_id is not None
        assert user.role == UserRole.USER
        assert user.mfa_enabled is False
        assert user.mfa_secret is None
        assert user.password_hash != "Str0ng!pass"
        assert verify_password("Str0ng!pass", user.password_hash)

    def test_create_admin(self, user_service):
        user = user_service.create_user("root", "root@example.com", "Str0ng!pass", role=UserRole.ADMIN)
        assert user.role == UserRole.ADMIN

    def test_duplicate_username(self, user_service, make_user):
        make_user("alice")
        with pytest.raises(IdentityExists):
            user_service.register("alice", "other@example.com", "Str0ng!pass")

    def test_duplicate_email(self, user_service, make_user):
        make_user("alice")
        with pytest.raises(IdentityExists):
            user_service.register("alice2", "alice@example.com", "Str0ng!pass")

    def test_duplicate_inserted_after_exists_check(self, user_service, store, make_user, monkeypatch):
        """A concurrent registration can win between exists() and the insert"""
        make_user("alice")
        monkeypatch.setattr(store, "exists", lambda username, email: False)

        with pytest.raises(IdentityExists):
            user_service.register("alice", "alice@example.com", "Str0ng!pass")

        # Session was rolled back and is still usable
        assert store.count() == 1
        assert user_service.register("bob", "bob@example.com", "Str0ng!pass").user_id is not None

    def test_weak_password(self, user_service, store):
        with pytest.raises(WeakPassword):
            user_service.register("alice", "alice@example.com", "weak")
        assert store.count() == 0

    def test_list_users(self, user_service, make_user):
        make_user("alice")
        make_user("bob")
        assert [u.username for u in user_service.list_users()] == ["alice", "bob"]


class TestPasswords:
    """Test password change and reset"""

    def test_change_password(self, user_service, make_user):
        user = make_user("alice")

        updated = user_service.change_password(user.user_id, TEST_PASSWORD, "New-pass123")

        assert verify_password("New-pass123", updated.password_hash)
        assert not verify_password(TEST_PASSWORD, updated.password_hash)

    def test_change_password_wrong_current(self, user_service, make_user):
        user = make_user("alice")

        with pytest.raises(InvalidCredentials) as exc_info:
            user_service.change_password(user.user_id, "Wrong-pass1", "New-pass123")

        assert exc_info.value.message == "Current password is incorrect"

    def test_change_password_weak_new(self, user_service, make_user):
        user = make_user("alice")
        with pytest.raises(WeakPassword):
            user_service.change_password(user.user_id, TEST_PASSWORD, "short")

    def test_reset_password(self, user_service, make_user):
        user = make_user("alice")
        updated = user_service.reset_password(user.user_id, "Reset-pass1")
        assert verify_password("Reset-pass1", updated.password_hash)

    def test_reset_unknown_user(self, user_service):
        with pytest.raises(NotFound):
            user_service.reset_password(42, "Reset-pass1")


class TestSeed:

    def test_seed_empty_database(self, user_service, store, test_settings):
        assert user_service.seed_defaults(test_settings) == 2

        admin = store.find_by_username("admin")
        assert admin.role == UserRole.ADMIN
        assert verify_password(test_settings.SEED_ADMIN_PASSWORD, admin.password_hash)
        assert store.find_by_username("user1").role == UserRole.USER

    def test_seed_skipped_when_users_exist(self, user_service, make_user, test_settings):
        make_user("alice")
        assert user_service.seed_defaults(test_settings) == 0


class TestIdentityStore:

    def test_find_unknown_username(self, store):
        assert store.find_by_username("ghost") is None

    def test_get_unknown_id(self, store):
        with pytest.raises(NotFound) as exc_info:
            store.get_by_id(7)
        assert exc_info.value.status_code == 404

    def test_second_factor_round_trip(self, store, make_user):
        user = make_user("alice")

        store.update_second_factor(user.user_id, SecondFactorState(enabled=False, secret="JBSWY3DPEHPK3PXP"))

        assert store.get_by_id(user.user_id).second_factor == SecondFactorState(
            enabled=False, secret="JBSWY3DPEHPK3PXP"
        )

    def test_enabled_without_secret_is_unrepresentable(self):
        with pytest.raises(ValueError):
            SecondFactorState(enabled=True, secret=None)

    def test_lock_by_id_reads_fresh_row(self, store, db_session, make_user):
        user = make_user("alice")
        store.update_second_factor(user.user_id, SecondFactorState(secret="JBSWY3DPEHPK3PXP"))

        locked = store.lock_by_id(user.user_id)

        assert locked.mfa_secret == "JBSWY3DPEHPK3PXP"
        db_session.rollback()
