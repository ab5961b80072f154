"""Tests for tenant registration, login and administration."""
import pytest

from ims.schemas.records import Table
from ims.services.accounts import reseed_admin
from ims.services.errors import (
    AccountNotApproved,
    DuplicateUsername,
    InvalidCredentials,
    NotAuthenticated,
    PermissionDenied,
    UserNotFound,
    ValidationFailed,
)
from ims.services.ownership import ADMIN_ID
from ims.services.session import SessionContext


class TestRegister:
    """Test self-service registration."""

    def test_register_creates_pending_user(self, context):
        user = context.accounts.register("Acme Corp", "Acme", "secret", "Wile E.")

        assert user["status"] == "Pending"
        assert user["role"] == "User"
        assert user["companyName"] == "Acme Corp"
        assert user["contactPerson"] == "Wile E."
        assert user["id"].startswith("user_")
        assert context.accounts.get_user(user["id"]) == user

    def test_password_is_hashed(self, context):
        user = context.accounts.register("Acme Corp", "Acme", "secret")

        assert user["password"] != "secret"
        assert user["password"].startswith("$2")

    def test_duplicate_username_ignores_case(self, context):
        context.accounts.register("Acme Corp", "Acme", "secret")

        with pytest.raises(DuplicateUsername) as exc_info:
            context.accounts.register("Other", "ACME", "x")

        assert exc_info.value.message == "User Name already taken"
        assert len(context.store.get(Table.USERS)) == 2

    def test_admin_username_is_taken(self, context):
        with pytest.raises(DuplicateUsername):
            context.accounts.register("Imposter", "Admin", "x")

    @pytest.mark.parametrize("company,username,password", [
        ("", "Acme", "secret"),
        ("Acme Corp", "   ", "secret"),
        ("Acme Corp", "Acme", ""),
    ])
    def test_required_fields(self, context, company, username, password):
        with pytest.raises(ValidationFailed):
            context.accounts.register(company, username, password)

    def test_ids_are_unique(self, context):
        ids = {context.accounts.register("Co", f"user{n}", "pw")["id"] for n in range(20)}

        assert len(ids) == 20

    def test_register_pushes_record(self, context, sheet):
        context.sync.set_endpoint(sheet.url)

        user = context.accounts.register("Acme Corp", "Acme", "secret")
        context.sync.flush(timeout=5)

        assert sheet.posts == [{"action": "save_record", "key": "ims_users", "data": user}]


class TestAuthenticate:
    """Test login rules."""

    def test_approved_user_logs_in_ignoring_username_case(self, context, acme):
        user = context.accounts.authenticate("aCmE", "secret")

        assert user["id"] == acme.user["id"]

    def test_password_is_case_sensitive(self, context, acme):
        with pytest.raises(InvalidCredentials) as exc_info:
            context.accounts.authenticate("Acme", "SECRET")

        assert "capitalization" in exc_info.value.message

    def test_unknown_user(self, context):
        with pytest.raises(InvalidCredentials):
            context.accounts.authenticate("nobody", "secret")

    def test_pending_user_rejected(self, context):
        context.accounts.register("Acme Corp", "Acme", "secret")

        with pytest.raises(AccountNotApproved):
            context.accounts.authenticate("Acme", "secret")

    def test_rejected_user_rejected(self, context, admin):
        user = context.accounts.register("Acme Corp", "Acme", "secret")
        context.accounts.update_user_status(admin, user["id"], "Rejected")

        with pytest.raises(AccountNotApproved):
            context.accounts.authenticate("Acme", "secret")

    def test_admin_logs_in_with_configured_password(self, context):
        user = context.accounts.authenticate("admin", "admin123")

        assert user["id"] == ADMIN_ID

    def test_legacy_plaintext_password(self, context):
        """Rows written by the browser client store plaintext passwords."""
        users = context.store.get(Table.USERS)
        users.append({
            "id": "user_legacy", "companyName": "Old Co", "username": "legacy",
            "contactPerson": "", "password": "plain", "role": "User", "status": "Approved",
        })
        context.store.put(Table.USERS, users)

        assert context.accounts.authenticate("legacy", "plain")["id"] == "user_legacy"
        with pytest.raises(InvalidCredentials):
            context.accounts.authenticate("legacy", "Plain")


class TestUserStatus:
    """Test admin approval and deletion."""

    def test_approve(self, context, admin):
        user = context.accounts.register("Acme Corp", "Acme", "secret")

        updated = context.accounts.update_user_status(admin, user["id"], "Approved")

        assert updated["status"] == "Approved"
        assert context.accounts.get_user(user["id"])["status"] == "Approved"

    def test_non_admin_cannot_change_status(self, context, acme, globex):
        with pytest.raises(PermissionDenied):
            context.accounts.update_user_status(acme, globex.user["id"], "Rejected")

    def test_anonymous_cannot_list_users(self, context):
        with pytest.raises(NotAuthenticated):
            context.accounts.get_users(SessionContext())

    def test_unknown_status(self, context, admin, acme):
        with pytest.raises(ValidationFailed):
            context.accounts.update_user_status(admin, acme.user["id"], "Banned")

    def test_unknown_user(self, context, admin):
        with pytest.raises(UserNotFound):
            context.accounts.update_user_status(admin, "user_missing", "Approved")

    @pytest.mark.parametrize("status", ["Rejected", "Pending", "Delete"])
    def test_admin_account_is_immutable(self, context, admin, status):
        with pytest.raises(PermissionDenied):
            context.accounts.update_user_status(admin, ADMIN_ID, status)

        assert context.accounts.get_user(ADMIN_ID)["status"] == "Approved"

    def test_delete_removes_user_and_republishes_table(self, context, admin, acme, sheet):
        """A delete cannot be expressed as an upsert, so the whole sheet is sent."""
        context.sync.set_endpoint(sheet.url)

        result = context.accounts.update_user_status(admin, acme.user["id"], "Delete")
        context.sync.flush(timeout=5)

        assert result is None
        assert context.accounts.get_user(acme.user["id"]) is None
        assert len(sheet.posts) == 1
        post = sheet.posts[0]
        assert post["action"] == "bulk_save"
        assert post["key"] == "ims_users"
        assert [u["username"] for u in post["data"]] == ["admin"]

    def test_get_users_lists_everyone(self, context, admin, acme, globex):
        names = [u["username"] for u in context.accounts.get_users(admin)]

        assert names == ["admin", "Acme", "Globex"]


class TestResetPassword:
    """Test password changes."""

    def test_admin_resets_tenant_password(self, context, admin, acme):
        context.accounts.reset_password(admin, acme.user["id"], "new-pass")

        assert context.accounts.authenticate("Acme", "new-pass")["id"] == acme.user["id"]
        with pytest.raises(InvalidCredentials):
            context.accounts.authenticate("Acme", "secret")

    def test_tenant_changes_own_password(self, context, acme):
        context.accounts.reset_password(acme, acme.user["id"], "mine")

        assert context.accounts.authenticate("Acme", "mine")

    def test_tenant_cannot_reset_others(self, context, acme, globex):
        with pytest.raises(PermissionDenied):
            context.accounts.reset_password(acme, globex.user["id"], "hijack")

    def test_empty_password(self, context, acme):
        with pytest.raises(ValidationFailed):
            context.accounts.reset_password(acme, acme.user["id"], "")

    def test_admin_password_restored_on_reseed(self, context, admin, settings):
        """A changed admin password only lasts until the next startup."""
        context.accounts.reset_password(admin, ADMIN_ID, "changed")
        assert context.accounts.authenticate("admin", "changed")

        reseed_admin(context.store, settings)

        assert context.accounts.authenticate("admin", "admin123")["id"] == ADMIN_ID


class TestReseedAdmin:
    """Test that exactly one privileged tenant survives any users table."""

    def test_rogue_admin_rows_are_dropped(self, store, settings):
        store.put(Table.USERS, [
            {"id": "user_1", "username": "Acme", "role": "User", "status": "Approved"},
            {"id": "user_2", "username": "boss", "role": "Admin", "status": "Approved"},
            {"id": "user_3", "username": "ADMIN", "role": "User", "status": "Approved"},
        ])

        reseed_admin(store, settings)

        users = store.get(Table.USERS)
        assert [u["id"] for u in users] == [ADMIN_ID, "user_1"]
        assert users[0]["role"] == "Admin"

    def test_configured_username(self, store, settings):
        custom = settings.model_copy(update={"admin_username": "root", "admin_company_name": "HQ"})

        admin = reseed_admin(store, custom)

        assert admin["username"] == "root"
        assert store.get(Table.USERS)[0]["companyName"] == "HQ"
