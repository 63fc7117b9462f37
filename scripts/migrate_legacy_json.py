#!/usr/bin/env python3
"""
One-shot import of the legacy db.json document.

Properties and entries keep their original ids; each entry's embedded
employee list becomes rows in entry_employees. The whole import runs in
one transaction, so a failure leaves the database untouched.

Usage:
    python scripts/migrate_legacy_json.py [db.json] [--db-url URL] [--create-schema]
"""
import argparse
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from fieldhours.config import settings
from fieldhours.db import Store
from fieldhours.logging import setup_logging
from fieldhours.services.legacy_import import import_legacy, load_legacy_file


def main(argv=None):
    parser = argparse.ArgumentParser(description="Import the legacy JSON data file into the database.")
    parser.add_argument("path", nargs="?", default="db.json", help="Path to the legacy JSON document.")
    parser.add_argument("--db-url", default=settings.database_url, help="SQLAlchemy database URL.")
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create missing tables before importing.",
    )
    args = parser.parse_args(argv)

    if not os.path.exists(args.path):
        print(f"ERROR: File not found: {args.path}")
        sys.exit(1)

    setup_logging(settings.log_level)
    data = load_legacy_file(args.path)
    store = Store(args.db_url, timeout_seconds=settings.db_timeout_seconds)
    print("Starting data migration...")
    try:
        if args.create_schema:
            store.init_schema()
        db = store.session()
        try:
            counts = import_legacy(db, data)
        finally:
            db.close()
    except Exception as e:
        print(f"❌ Migration failed, nothing was imported: {e}")
        sys.exit(1)
    finally:
        store.close()

    print(f"{counts['properties']} properties migrated.")
    print(f"{counts['employees']} employees migrated.")
    print(f"{counts['entries']} entries migrated ({counts['entry_employees']} employee links).")
    print("✅ Migration Complete!")


if __name__ == "__main__":
    main()
