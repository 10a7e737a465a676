"""
Database schema bootstrap script
--------------------------------
Creates the places, bookmark, review, reservation and voting tables.
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")

sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import inspect

from foodie.core.config import settings
from foodie.db.init_db import init_db
from foodie.db.session import engine


def init_db_schema() -> None:
    """Create every table and list what exists afterwards."""
    print(f"Initializing schema (timestamp format: {settings.timestamp_format})...")
    init_db(engine)
    print("Tables:")
    for name in sorted(inspect(engine).get_table_names()):
        print(f"  - {name}")


if __name__ == "__main__":
    init_db_schema()
