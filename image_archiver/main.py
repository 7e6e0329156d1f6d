from fastapi import BackgroundTasks, Depends, FastAPI, Query
from fastapi.responses import PlainTextResponse
from typing import List
import logging
import os
from pathlib import Path

from image_archiver.auth import verify_api_key
from image_archiver.config import load_config
from image_archiver.constants import DEFAULT_LOG_DIRECTORY_DEV, DEFAULT_LOG_DIRECTORY_PROD
from image_archiver.database import init_db
from image_archiver.runner import get_ledger, get_orchestrator, run_backup
from image_archiver.scheduler import start_scheduler, stop_scheduler
from image_archiver.schemas import (
    ExportStartedResponse, ExportedFileResponse, LockStatusResponse, StatusResponse
)
from image_archiver.services.ledger import DedupLedger
from image_archiver.services.orchestrator import BackupOrchestrator

LOG_DIR = os.getenv("ARCHIVER_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("ARCHIVER_LOG_FILE", "archiver.log")

# Create log directory if it doesn't exist (for development)
try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("image_archiver")

app = FastAPI(
    title="Image Archiver API",
    description="Archives Slack channel images into Google Drive",
    version="1.0.0"
)


@app.on_event("startup")
async def startup_event():
    init_db()
    config = load_config()
    logger.info(f"Image Archiver started. Logging to: {log_path}")
    start_scheduler(config.cron_schedule)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Image Archiver")
    stop_scheduler()


# Health check (no auth required)
@app.get("/health", response_class=PlainTextResponse)
async def health():
    return "OK"


@app.post("/export", response_model=ExportStartedResponse)
async def export_images(background_tasks: BackgroundTasks):
    """Start a backup in the background; the response never reflects its outcome"""
    logger.info("Manual backup triggered")
    background_tasks.add_task(run_backup)
    return ExportStartedResponse()


@app.get("/api/status", response_model=StatusResponse, dependencies=[Depends(verify_api_key)])
def get_status(
    orchestrator: BackupOrchestrator = Depends(get_orchestrator),
    ledger: DedupLedger = Depends(get_ledger)
):
    """Lock row, in-process run state and the last run report"""
    lock = orchestrator.lock.status()
    return StatusResponse(
        lock=LockStatusResponse.model_validate(lock) if lock else LockStatusResponse(is_running=False),
        state=orchestrator.state.value,
        last_run=orchestrator.last_run,
        exported_count=ledger.count()
    )


@app.get("/api/exported", response_model=List[ExportedFileResponse], dependencies=[Depends(verify_api_key)])
def get_exported_files(
    limit: int = Query(50, ge=1, le=500),
    ledger: DedupLedger = Depends(get_ledger)
):
    """Most recently archived files"""
    return ledger.list_recent(limit)


@app.post("/api/lock/reset", response_model=LockStatusResponse, dependencies=[Depends(verify_api_key)])
def reset_lock(orchestrator: BackupOrchestrator = Depends(get_orchestrator)):
    """Force-release a lock left behind by a crashed run"""
    orchestrator.lock.force_release()
    lock = orchestrator.lock.status()
    if not lock:
        return LockStatusResponse(is_running=False)
    return LockStatusResponse.model_validate(lock)
