"""
Seed Permissions Script
Populates the permissions table from the permission catalog in the config.
Safe to re-run: rows are matched on code, so existing grants keep their permission ids.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config.permissions_config import PERMISSION_CATALOG
from app.database.supabase_client import get_supabase_admin
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_permissions(supabase: Client) -> int:
    """Upsert every catalog permission on its code. Returns the number of rows written."""
    logger.info(f"Seeding {len(PERMISSION_CATALOG)} permissions...")
    rows = [
        {
            "code": perm["code"],
            "name": perm["name"],
            "category": perm["category"],
            "description": perm["description"],
        }
        for perm in PERMISSION_CATALOG
    ]
    result = supabase.table("permissions").upsert(rows, on_conflict="code").execute()
    written = len(result.data or [])
    logger.info(f"Permissions seeded: {written} rows written")
    return written


def main():
    try:
        supabase = get_supabase_admin()
        seed_permissions(supabase)
        logger.info("Seeding completed successfully!")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
