"""
Wiring for backup runs.
Both the HTTP trigger and the scheduler call run_backup().
"""
import logging
import threading
from typing import Optional

from image_archiver.clients.drive_store import GoogleDriveFileStore
from image_archiver.clients.slack_feed import SlackMessageFeed
from image_archiver.config import ArchiverConfig, load_config
from image_archiver.database import SessionLocal
from image_archiver.services.history_walker import HistoryWalker
from image_archiver.services.ledger import DedupLedger
from image_archiver.services.orchestrator import BackupOrchestrator, RunOutcome
from image_archiver.services.retry import RetryPolicy
from image_archiver.services.run_lock import RunLock
from image_archiver.services.transfer_service import ItemTransfer

logger = logging.getLogger("image_archiver.runner")

_orchestrator: Optional[BackupOrchestrator] = None
_orchestrator_guard = threading.Lock()


def create_orchestrator(config: ArchiverConfig, session_factory=SessionLocal) -> BackupOrchestrator:
    """Build an orchestrator whose walker is wired to Slack and Google Drive"""
    ledger = DedupLedger(session_factory)
    clients = {}

    def build_walker() -> HistoryWalker:
        config.require()
        # Provider clients are reused across runs
        if not clients:
            store = GoogleDriveFileStore.from_config(config)
            clients["slack"] = SlackMessageFeed(config.slack_bot_token)
            clients["drive"] = store
        slack = clients["slack"]
        store = clients["drive"]
        transfer = ItemTransfer(
            downloader=slack,
            store=store,
            folder_id=config.google_drive_folder_id,
            scratch_dir=config.scratch_dir
        )
        return HistoryWalker(
            feed=slack,
            ledger=ledger,
            transfer=transfer,
            channel_id=config.slack_channel_id,
            retry=RetryPolicy(max_attempts=config.max_attempts),
            page_size=config.page_size
        )

    return BackupOrchestrator(RunLock(session_factory), build_walker)


def get_orchestrator() -> BackupOrchestrator:
    """Process-wide orchestrator, created on first use"""
    global _orchestrator
    with _orchestrator_guard:
        if _orchestrator is None:
            _orchestrator = create_orchestrator(load_config())
        return _orchestrator


def run_backup() -> RunOutcome:
    """Run one backup; never raises"""
    try:
        orchestrator = get_orchestrator()
    except Exception as e:
        logger.exception(f"Could not set up backup run: {e}")
        return RunOutcome.FAILED
    return orchestrator.run()


def get_ledger() -> DedupLedger:
    return DedupLedger(SessionLocal)
