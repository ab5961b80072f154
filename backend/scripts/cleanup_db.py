"""Drop every cached table so the next start pulls a fresh copy from the sheet."""
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ims.database import SessionLocal, init_db
from ims.models import CacheEntry
from ims.schemas.records import SYNC_URL_KEY


def cleanup():
    init_db()
    db = SessionLocal()
    try:
        print("Clearing local cache...")
        # The operator-set endpoint survives so the next start can pull
        deleted = db.query(CacheEntry).filter(CacheEntry.key != SYNC_URL_KEY).delete()
        db.commit()
        print(f"Cleanup complete, removed {deleted} entries.")
    except Exception as e:
        print(f"Error during cleanup: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    cleanup()
