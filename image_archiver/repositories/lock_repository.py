"""
Backup lock repository - Data access layer for the BackupLock model.

Every write here is a single UPDATE statement on the singleton row, so the
database decides who wins when two triggers race for the lock.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from image_archiver.constants import BACKUP_LOCK_ROW_ID
from image_archiver.models import BackupLock


class BackupLockRepository:
    """Repository for BackupLock data access"""

    @staticmethod
    def get(db: Session) -> Optional[BackupLock]:
        return db.query(BackupLock).filter(BackupLock.id == BACKUP_LOCK_ROW_ID).first()

    @staticmethod
    def try_acquire(db: Session, run_id: str) -> bool:
        """
        Flip is_running from False to True in one conditional update.

        Returns:
            True if this call changed the row (caller owns the lock)
        """
        updated = db.query(BackupLock).filter(
            BackupLock.id == BACKUP_LOCK_ROW_ID,
            BackupLock.is_running == False
        ).update(
            {
                BackupLock.is_running: True,
                BackupLock.started_at: datetime.utcnow(),
                BackupLock.run_id: run_id,
            },
            synchronize_session=False
        )
        db.commit()
        return updated > 0

    @staticmethod
    def release(db: Session, run_id: str) -> bool:
        """
        Clear the lock if it is still held by run_id.

        Returns:
            True if the row was released
        """
        updated = db.query(BackupLock).filter(
            BackupLock.id == BACKUP_LOCK_ROW_ID,
            BackupLock.run_id == run_id
        ).update(
            {BackupLock.is_running: False, BackupLock.run_id: None},
            synchronize_session=False
        )
        db.commit()
        return updated > 0

    @staticmethod
    def force_release(db: Session) -> bool:
        """Clear the lock regardless of holder (operator recovery)"""
        updated = db.query(BackupLock).filter(
            BackupLock.id == BACKUP_LOCK_ROW_ID
        ).update(
            {BackupLock.is_running: False, BackupLock.run_id: None},
            synchronize_session=False
        )
        db.commit()
        return updated > 0
