#!/usr/bin/env python3
"""
Take a single database snapshot outside the daily schedule.

Usage:
    python scripts/backup_now.py [--db-url URL] [--backup-dir DIR] [--keep N]
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
from fieldhours.services.backup import create_backup


def main(argv=None):
    parser = argparse.ArgumentParser(description="Copy the database file into the backups directory.")
    parser.add_argument("--db-url", default=settings.database_url, help="SQLAlchemy database URL.")
    parser.add_argument("--backup-dir", default=settings.backup_dir, help="Defaults to backups/ beside the database.")
    parser.add_argument("--keep", type=int, default=settings.backup_keep, help="Snapshots to retain (0 keeps all).")
    args = parser.parse_args(argv)

    setup_logging(settings.log_level)
    store = Store(args.db_url, timeout_seconds=settings.db_timeout_seconds)
    try:
        path = create_backup(store, args.backup_dir, keep=args.keep)
        print(f"✅ Backup created: {path}")
    except Exception as e:
        print(f"❌ Failed to create backup: {e}")
        sys.exit(1)
    finally:
        store.close()


if __name__ == "__main__":
    main()
