"""Tenant lifecycle: registration, login, approval and password resets."""
import logging

from ims.config import Settings
from ims.schemas.records import Table, UserRecord, UserRole, UserStatus
from ims.security import get_password_hash, verify_password
from ims.services.errors import (
    AccountNotApproved,
    DuplicateUsername,
    InvalidCredentials,
    PermissionDenied,
    UserNotFound,
    ValidationFailed,
)
from ims.services.ownership import ADMIN_ID, is_privileged
from ims.services.session import SessionContext

logger = logging.getLogger(__name__)

DELETE = "Delete"


def admin_record(settings: Settings) -> dict:
    """The privileged tenant exactly as configured."""
    return UserRecord(
        id=ADMIN_ID,
        company_name=settings.admin_company_name,
        username=settings.admin_username,
        password=get_password_hash(settings.admin_password),
        role=UserRole.ADMIN,
        status=UserStatus.APPROVED,
    ).to_wire()


def reseed_admin(store, settings: Settings) -> dict:
    """
    Put the privileged tenant back at the head of the users table.

    Any stored copy is overwritten, including a changed password, and every
    other row claiming the reserved id, the Admin role or the admin username
    is dropped so exactly one privileged tenant remains.
    """
    admin = admin_record(settings)
    name = admin["username"].lower()
    others = [
        u for u in store.get(Table.USERS)
        if isinstance(u, dict)
        and u.get("id") != ADMIN_ID
        and u.get("role") != UserRole.ADMIN.value
        and str(u.get("username", "")).lower() != name
    ]
    store.put(Table.USERS, [admin] + others)
    return admin


class AccountService:
    """Tenant records live in the users table and are synced like any other row."""

    def __init__(self, store, sync):
        self.store = store
        self.sync = sync

    def find_by_username(self, username: str) -> dict | None:
        wanted = (username or "").strip().lower()
        for user in self.store.get(Table.USERS):
            if isinstance(user, dict) and str(user.get("username", "")).lower() == wanted:
                return user
        return None

    def get_user(self, user_id: str) -> dict | None:
        for user in self.store.get(Table.USERS):
            if isinstance(user, dict) and user.get("id") == user_id:
                return user
        return None

    def register(self, company_name: str, username: str, password: str, contact_person: str = "") -> dict:
        """Create a Pending tenant. Usernames are unique ignoring case."""
        username = (username or "").strip()
        if not username or not password or not (company_name or "").strip():
            raise ValidationFailed("Company name, user name and password are required")

        users = self.store.get(Table.USERS)
        if any(str(u.get("username", "")).lower() == username.lower() for u in users if isinstance(u, dict)):
            raise DuplicateUsername()

        record = UserRecord(
            company_name=company_name.strip(),
            username=username,
            contact_person=(contact_person or "").strip(),
            password=get_password_hash(password),
            role=UserRole.USER,
            status=UserStatus.PENDING,
        ).to_wire()

        users.append(record)
        self.store.put(Table.USERS, users)
        self.sync.push_record(Table.USERS, record)
        logger.info(f"Registered tenant {username} (pending approval)")
        return record

    def authenticate(self, username: str, password: str) -> dict:
        """Case-insensitive user name, exact password, Approved status."""
        user = self.find_by_username(username)
        if not user or not verify_password(password or "", str(user.get("password", ""))):
            logger.warning(f"Login failed for {username!r}")
            raise InvalidCredentials()
        if user.get("status") != UserStatus.APPROVED.value:
            raise AccountNotApproved()
        return user

    def get_users(self, ctx: SessionContext) -> list[dict]:
        ctx.require_admin()
        return [u for u in self.store.get(Table.USERS) if isinstance(u, dict)]

    def update_user_status(self, ctx: SessionContext, user_id: str, status: str) -> dict | None:
        """Approve, reject, reset to pending, or delete a tenant. Returns None on delete."""
        ctx.require_admin()
        allowed = {s.value for s in UserStatus} | {DELETE}
        if status not in allowed:
            raise ValidationFailed(f"Unknown status {status!r}")

        users = self.store.get(Table.USERS)
        index = next((i for i, u in enumerate(users) if isinstance(u, dict) and u.get("id") == user_id), None)
        if index is None:
            raise UserNotFound()
        if is_privileged(users[index]):
            raise PermissionDenied("The administrator account cannot be changed")

        if status == DELETE:
            removed = users.pop(index)
            self.store.put(Table.USERS, users)
            # save_record cannot express a removal, so republish the whole sheet
            self.sync.push_table(Table.USERS)
            logger.info(f"Deleted tenant {removed.get('username')}")
            return None

        users[index]["status"] = status
        self.store.put(Table.USERS, users)
        self.sync.push_record(Table.USERS, users[index])
        logger.info(f"Tenant {users[index].get('username')} is now {status}")
        return users[index]

    def reset_password(self, ctx: SessionContext, user_id: str, new_password: str) -> dict:
        """Admins may reset anyone; a tenant only itself."""
        actor = ctx.require_user()
        if not is_privileged(actor) and actor.get("id") != user_id:
            raise PermissionDenied()
        if not new_password:
            raise ValidationFailed("Password must not be empty")

        users = self.store.get(Table.USERS)
        for user in users:
            if isinstance(user, dict) and user.get("id") == user_id:
                user["password"] = get_password_hash(new_password)
                self.store.put(Table.USERS, users)
                self.sync.push_record(Table.USERS, user)
                if is_privileged(user):
                    logger.warning("Admin password changed; it is reset from settings on the next start")
                return user
        raise UserNotFound()
