"""
Dedup ledger service.
Durable record of which Slack files were archived and their Drive IDs.
"""
import logging
from typing import Callable, List

from sqlalchemy.orm import Session

from image_archiver.models import ExportedFile
from image_archiver.repositories.exported_file_repository import ExportedFileRepository

logger = logging.getLogger("image_archiver.ledger")


class DedupLedger:
    """Ledger of exported files; a row's presence means 'already archived'"""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory
        self.file_repo = ExportedFileRepository()

    def is_exported(self, slack_file_id: str) -> bool:
        db = self.session_factory()
        try:
            return self.file_repo.exists(db, slack_file_id)
        finally:
            db.close()

    def mark_exported(self, slack_file_id: str, name: str, drive_file_id: str) -> None:
        """
        Record a finished transfer.

        Raises:
            LedgerConflictException: if the file was already recorded
        """
        db = self.session_factory()
        try:
            self.file_repo.create(db, ExportedFile(
                slack_file_id=slack_file_id,
                slack_file_name=name,
                drive_file_id=drive_file_id
            ))
        finally:
            db.close()
        logger.info(f"Recorded export: {slack_file_id} -> {drive_file_id}")

    def count(self) -> int:
        db = self.session_factory()
        try:
            return self.file_repo.count(db)
        finally:
            db.close()

    def list_recent(self, limit: int = 50) -> List[ExportedFile]:
        db = self.session_factory()
        try:
            records = self.file_repo.get_recent(db, limit)
            db.expunge_all()
            return records
        finally:
            db.close()
