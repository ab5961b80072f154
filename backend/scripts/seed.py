"""Seed script to create the admin and an approved demo tenant with some stock."""
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ims.config import get_settings
from ims.context import build_context
from ims.database import SessionLocal, init_db
from ims.schemas.records import UserStatus
from ims.services.errors import DuplicateUsername
from ims.services.ownership import ADMIN_ID
from ims.services.session import SessionContext


def seed_database():
    """Create the demo tenant and stock it. Safe to run twice."""
    settings = get_settings()
    init_db()
    context = build_context(settings, SessionLocal)

    try:
        context.sync.initialize()
        admin = SessionContext(user=context.accounts.get_user(ADMIN_ID))
        print(f"Admin ready: {settings.admin_username}")

        try:
            user = context.accounts.register("Demo Trading", "demo", "demo", "Demo Contact")
            print(f"Created demo tenant: {user['id']}")
        except DuplicateUsername:
            user = context.accounts.find_by_username("demo")
            print(f"Demo tenant already exists: {user['id']}")

        if user.get("status") != UserStatus.APPROVED.value:
            context.accounts.update_user_status(admin, user["id"], UserStatus.APPROVED.value)
            print("Approved demo tenant")

        demo = SessionContext(user=context.accounts.get_user(user["id"]))
        if not context.inventory.get_inventory(demo):
            print("Adding demo stock...")
            context.inventory.add_stock(demo, "Acme Supply", "Parts", "Widget", "A", 10, 1.5, "Cash")
            context.inventory.add_stock(demo, "Acme Supply", "Parts", "Gadget", "B", 4, 12.0, "Credit")
            context.ledger.add_expense(demo, "Rent", 250)
        print("  Username: demo")
        print("  Password: demo")

        print("\n✅ Seed completed successfully!")
    finally:
        context.sync.shutdown()


if __name__ == "__main__":
    seed_database()
