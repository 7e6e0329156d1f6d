from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional


# Slack history feed
class CandidateItem(BaseModel):
    """One file attached to a Slack message"""
    id: str
    name: Optional[str] = None
    mimetype: Optional[str] = None  # Deleted files ("tombstones") carry no mimetype
    url_private: Optional[str] = None


class FeedMessage(BaseModel):
    ts: Optional[str] = None
    files: List[CandidateItem] = Field(default_factory=list)


class FeedPage(BaseModel):
    messages: List[FeedMessage] = Field(default_factory=list)
    next_cursor: Optional[str] = None  # Empty or missing when history is exhausted


class WalkSummary(BaseModel):
    pages: int = 0
    transferred: int = 0
    skipped_non_image: int = 0
    skipped_exported: int = 0


# API responses
class ExportStartedResponse(BaseModel):
    status: str = "Export started"


class ExportedFileResponse(BaseModel):
    slack_file_id: str
    slack_file_name: Optional[str]
    drive_file_id: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class LockStatusResponse(BaseModel):
    is_running: bool
    started_at: Optional[datetime] = None
    run_id: Optional[str] = None

    class Config:
        from_attributes = True


class RunReportResponse(BaseModel):
    run_id: Optional[str] = None
    outcome: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    summary: Optional[WalkSummary] = None
    error: Optional[str] = None


class StatusResponse(BaseModel):
    lock: LockStatusResponse
    state: str
    last_run: Optional[RunReportResponse] = None
    exported_count: int
