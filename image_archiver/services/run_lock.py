"""
Run lock service.
Non-blocking mutual exclusion for backup runs, backed by the backup_lock row.
"""
import logging
import uuid
from typing import Callable, Optional

from sqlalchemy.orm import Session

from image_archiver.exceptions import LockReleaseException
from image_archiver.models import BackupLock
from image_archiver.repositories.lock_repository import BackupLockRepository

logger = logging.getLogger("image_archiver.lock")


class RunLock:
    """
    Database-backed try-lock.

    acquire() never waits: a caller that loses the race gets None and must
    give up. The winner gets a run id token; release(token) only clears the
    row while that token is still the one stored, so one instance can be
    shared by every trigger in the process.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory
        self.lock_repo = BackupLockRepository()

    def acquire(self) -> Optional[str]:
        """
        Try to take the lock. Storage errors propagate.

        Returns:
            Run id token if this caller won, None otherwise
        """
        run_id = uuid.uuid4().hex
        db = self.session_factory()
        try:
            acquired = self.lock_repo.try_acquire(db, run_id)
        finally:
            db.close()

        if not acquired:
            return None
        logger.info(f"Backup lock acquired (run {run_id})")
        return run_id

    def release(self, run_id: str) -> bool:
        """
        Release the lock held by run_id.

        Returns:
            True if the row was cleared, False if run_id no longer owned it
        """
        db = self.session_factory()
        try:
            released = self.lock_repo.release(db, run_id)
        except Exception as e:
            db.rollback()
            raise LockReleaseException(str(e)) from e
        finally:
            db.close()

        if released:
            logger.info(f"Backup lock released (run {run_id})")
        else:
            logger.warning(f"Backup lock no longer owned by run {run_id}; left untouched")
        return released

    def force_release(self) -> bool:
        """Clear the lock whoever holds it. Used to recover from a crashed run."""
        db = self.session_factory()
        try:
            released = self.lock_repo.force_release(db)
        finally:
            db.close()
        logger.warning("Backup lock force-released by operator")
        return released

    def status(self) -> Optional[BackupLock]:
        db = self.session_factory()
        try:
            lock = self.lock_repo.get(db)
            if lock is not None:
                db.expunge(lock)
            return lock
        finally:
            db.close()
