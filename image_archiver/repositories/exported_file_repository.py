"""
Exported file repository - Data access layer for the ExportedFile model.
Handles all database queries related to the dedup ledger.
"""
from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from image_archiver.exceptions import LedgerConflictException
from image_archiver.models import ExportedFile


class ExportedFileRepository:
    """Repository for ExportedFile data access"""

    @staticmethod
    def exists(db: Session, slack_file_id: str) -> bool:
        """Check whether a Slack file has been archived"""
        return db.query(ExportedFile.slack_file_id).filter(
            ExportedFile.slack_file_id == slack_file_id
        ).first() is not None

    @staticmethod
    def create(db: Session, record: ExportedFile) -> ExportedFile:
        """
        Insert a new ledger row.

        Raises:
            LedgerConflictException: if the Slack file is already recorded
        """
        db.add(record)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise LedgerConflictException(record.slack_file_id) from e
        db.refresh(record)
        return record

    @staticmethod
    def count(db: Session) -> int:
        return db.query(ExportedFile).count()

    @staticmethod
    def get_recent(db: Session, limit: int = 50) -> List[ExportedFile]:
        """Get ledger rows, newest first"""
        return db.query(ExportedFile).order_by(
            ExportedFile.created_at.desc()
        ).limit(limit).all()
