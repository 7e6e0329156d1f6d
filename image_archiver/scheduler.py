"""
Background scheduler for automatic image backups.
Runs the backup job on the configured cron schedule.
"""

import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from image_archiver.constants import BACKUP_JOB_ID, DEFAULT_CRON_SCHEDULE
from image_archiver.runner import run_backup

logger = logging.getLogger("image_archiver.scheduler")

# Create scheduler instance
scheduler = AsyncIOScheduler()


def scheduled_backup():
    """Scheduled job: one backup run (sync, executed in the scheduler's thread pool)"""
    logger.info("Scheduled backup triggered")
    outcome = run_backup()
    logger.info(f"Scheduled backup finished: {outcome.value}")


def build_trigger(cron_schedule: str) -> CronTrigger:
    """Parse a five-field crontab expression, falling back to the default"""
    try:
        return CronTrigger.from_crontab(cron_schedule)
    except ValueError as e:
        logger.error(f"Invalid CRON_SCHEDULE '{cron_schedule}': {e}. Using '{DEFAULT_CRON_SCHEDULE}'")
        return CronTrigger.from_crontab(DEFAULT_CRON_SCHEDULE)


def start_scheduler(cron_schedule: str = DEFAULT_CRON_SCHEDULE):
    """Start the background scheduler"""
    if not scheduler.running:
        scheduler.add_job(
            scheduled_backup,
            build_trigger(cron_schedule),
            id=BACKUP_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )

        scheduler.start()
        logger.info(f"Scheduler started, backup schedule: {cron_schedule}")
        logger.info(f"Scheduled jobs: {[job.id for job in scheduler.get_jobs()]}")


def stop_scheduler():
    """Stop the background scheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
