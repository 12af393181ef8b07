#!/usr/bin/env python3
"""
Initialize the local user-record database.

Creates the table that caches the user view for each session token.
"""
import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from config.logging_config import setup_logging
from data.database import DatabaseManager


def main():
    parser = argparse.ArgumentParser(
        description='Initialize SmartLens user-record database'
    )
    parser.add_argument(
        '--database-url',
        type=str,
        default=None,
        help='Database URL (default: DATABASE_URL setting)'
    )
    parser.add_argument(
        '--drop-existing',
        action='store_true',
        help='Drop existing tables before creating new ones (WARNING: destroys data!)'
    )

    args = parser.parse_args()
    setup_logging()

    db_manager = DatabaseManager(args.database_url)

    print("=" * 60)
    print("SmartLens Database Initialization")
    print("=" * 60)
    print(f"Database URL: {db_manager.database_url}")
    print()

    if args.drop_existing:
        confirm = input("Drop existing tables? This will DELETE ALL DATA! (yes/no): ")
        if confirm.lower() == 'yes':
            db_manager.drop_tables()
            print()
        else:
            print("Aborted.")
            return

    db_manager.create_tables()

    print()
    print("✓ Database initialized successfully!")
    print()
    print("Tables created:")
    print("  - user_records")
    print()
    print("Start the API server with:")
    print("  uvicorn --factory serving.app:create_app --port 8080")
    print()


if __name__ == '__main__':
    main()
