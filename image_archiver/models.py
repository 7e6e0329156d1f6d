from sqlalchemy import Column, Integer, String, Boolean, DateTime
from datetime import datetime

from image_archiver.database import Base


class ExportedFile(Base):
    __tablename__ = "exported_files"

    slack_file_id = Column(String, primary_key=True)  # One row per archived Slack file
    slack_file_name = Column(String, nullable=True)   # Display/debug only
    drive_file_id = Column(String, nullable=True)     # Google Drive file ID
    created_at = Column(DateTime, default=datetime.utcnow, index=True)


class BackupLock(Base):
    __tablename__ = "backup_lock"

    id = Column(Integer, primary_key=True)
    is_running = Column(Boolean, default=False, nullable=False)
    started_at = Column(DateTime, nullable=True)

    # Token of the run holding the lock; release only clears a matching token
    run_id = Column(String, nullable=True)
