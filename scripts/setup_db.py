#!/usr/bin/env python3
"""
Script to create the database tables.
Safe to run more than once: existing tables and rows are left alone.
The server also does this automatically on startup when AUTO_CREATE_DB is on.

Usage:
    python scripts/setup_db.py [--db-url sqlite:///./database.db]
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


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create the database tables if they are missing.")
    parser.add_argument("--db-url", default=settings.database_url, help="SQLAlchemy database URL.")
    args = parser.parse_args(argv)

    setup_logging(settings.log_level)
    store = Store(args.db_url, timeout_seconds=settings.db_timeout_seconds)
    try:
        store.init_schema()
        print(f"✅ Tables ready in {store.database_path or args.db_url}")
    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        raise
    finally:
        store.close()


if __name__ == "__main__":
    main()
