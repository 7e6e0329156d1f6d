"""
Backup run orchestrator.

State machine for one run:
    IDLE -> ACQUIRING -> RUNNING -> RELEASING -> IDLE
    IDLE -> ACQUIRING -> SKIPPED_BUSY -> IDLE     (lock held elsewhere)

Only the lock row is persisted. If the process dies while RUNNING the row
stays locked until an operator force-releases it.
"""
import enum
import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from image_archiver.schemas import RunReportResponse, WalkSummary

logger = logging.getLogger("image_archiver.backup")


class RunState(str, enum.Enum):
    IDLE = "idle"
    ACQUIRING = "acquiring"
    RUNNING = "running"
    RELEASING = "releasing"
    SKIPPED_BUSY = "skipped_busy"


class RunOutcome(str, enum.Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED_BUSY = "skipped_busy"


class BackupOrchestrator:
    """
    Runs the history walker under the backup lock.

    The walker is built by walker_factory only after the lock is won, so a
    skipped run makes no provider calls at all. Errors never escape run().

    `state` belongs to one trigger at a time: the trigger that moved it out
    of IDLE, or the trigger that won the lock. Other triggers leave it alone.
    """

    def __init__(self, lock, walker_factory: Callable[[], object]):
        self.lock = lock
        self.walker_factory = walker_factory
        self.state = RunState.IDLE
        self.last_run: Optional[RunReportResponse] = None
        self._state_guard = threading.Lock()
        self._state_owner = None

    def _set_state(self, new_state: RunState, owner: object, take: bool = False) -> None:
        with self._state_guard:
            if not take and self._state_owner not in (None, owner):
                return
            self.state = new_state
            self._state_owner = None if new_state == RunState.IDLE else owner

    def run(self) -> RunOutcome:
        owner = object()
        self._set_state(RunState.ACQUIRING, owner)

        try:
            run_id = self.lock.acquire()
        except Exception as e:
            logger.exception(f"Could not acquire backup lock: {e}")
            self._set_state(RunState.IDLE, owner)
            self.last_run = RunReportResponse(
                outcome=RunOutcome.FAILED.value,
                started_at=datetime.utcnow(),
                finished_at=datetime.utcnow(),
                error=str(e)
            )
            return RunOutcome.FAILED

        if not run_id:
            logger.info("Backup already running. Skipping.")
            self._set_state(RunState.SKIPPED_BUSY, owner)
            self._set_state(RunState.IDLE, owner)
            return RunOutcome.SKIPPED_BUSY

        outcome = RunOutcome.FAILED
        summary = None
        error = None
        started_at = datetime.utcnow()

        try:
            self._set_state(RunState.RUNNING, owner, take=True)
            logger.info(f"Backup started: {started_at.isoformat()}")
            walker = self.walker_factory()
            summary = walker.run()
            outcome = RunOutcome.COMPLETED
            logger.info(f"Backup completed: {datetime.utcnow().isoformat()}")
        except Exception as e:
            error = str(e)
            logger.exception(f"Backup failed: {e}")
        finally:
            self._set_state(RunState.RELEASING, owner)
            try:
                self.lock.release(run_id)
            except Exception as e:
                logger.error(f"Failed to release backup lock: {e}")
            self._set_state(RunState.IDLE, owner)
            self.last_run = RunReportResponse(
                run_id=str(run_id),
                outcome=outcome.value,
                started_at=started_at,
                finished_at=datetime.utcnow(),
                summary=summary if isinstance(summary, WalkSummary) else None,
                error=error
            )

        return outcome
