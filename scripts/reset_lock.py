#!/usr/bin/env python3
"""
Operator script to clear a backup lock left stuck by a crashed run.
Only reads and updates the existing backup_lock row; never creates tables.

Usage:
    python scripts/reset_lock.py [database_url]
    python scripts/reset_lock.py --status [database_url]
"""

import sys

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from image_archiver.database import DATABASE_URL, make_engine
from image_archiver.services.run_lock import RunLock


def main(argv):
    show_only = "--status" in argv
    args = [a for a in argv if a != "--status"]
    database_url = args[0] if args else DATABASE_URL

    engine = make_engine(database_url)
    lock = RunLock(sessionmaker(bind=engine))
    print(f"Database: {database_url}")

    try:
        current = lock.status()
        if current is None:
            print("\n✗ No backup lock row found. Start the archiver once to initialize the database.")
            return 1

        print(f"is_running={current.is_running} started_at={current.started_at} run_id={current.run_id}")

        if show_only:
            return 0

        if not current.is_running:
            print("\n✓ Lock is not held, nothing to do")
            return 0

        lock.force_release()
        print("\n✓ Lock released")
        return 0

    except SQLAlchemyError as e:
        print(f"\n✗ Could not read backup lock: {e}")
        return 1
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
