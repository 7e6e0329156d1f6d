"""
Tests for the backup scheduler and runner wiring.
"""
from unittest.mock import patch

from apscheduler.triggers.cron import CronTrigger

from image_archiver import runner, scheduler
from image_archiver.config import ArchiverConfig
from image_archiver.services.orchestrator import RunOutcome
from image_archiver.services.run_lock import RunLock


class TestBuildTrigger:

    def test_valid_expression(self):
        trigger = scheduler.build_trigger("*/5 * * * *")
        assert isinstance(trigger, CronTrigger)
        assert str(trigger.fields[6]) == "*/5"

    def test_invalid_expression_falls_back_to_default(self):
        trigger = scheduler.build_trigger("not a cron")
        assert str(trigger.fields[5]) == "2"  # hour
        assert str(trigger.fields[6]) == "0"  # minute


class TestScheduledBackup:

    def test_job_runs_backup(self):
        with patch.object(scheduler, "run_backup", return_value=RunOutcome.COMPLETED) as run_backup:
            scheduler.scheduled_backup()
        run_backup.assert_called_once()


class TestRunner:

    def test_incomplete_config_fails_run_and_frees_lock(self, session_factory):
        """Missing settings fail the run inside the lock, which is then released"""
        orchestrator = runner.create_orchestrator(ArchiverConfig(), session_factory)

        assert orchestrator.run() == RunOutcome.FAILED
        assert "SLACK_BOT_TOKEN" in orchestrator.last_run.error
        assert RunLock(session_factory).status().is_running is False

    def test_run_backup_never_raises(self):
        with patch.object(runner, "get_orchestrator", side_effect=RuntimeError("bad config")):
            assert runner.run_backup() == RunOutcome.FAILED
