"""
Tests for RunLock.

Tests cover:
1. Compare-and-swap acquire
2. Concurrent acquire attempts
3. Token-checked release and operator force release
4. Storage error propagation
"""
import threading

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from image_archiver.database import make_engine
from image_archiver.models import BackupLock
from image_archiver.services.run_lock import RunLock


class TestAcquire:
    """Tests for acquire()"""

    def test_acquire_free_lock(self, session_factory):
        """Should win a free lock, return a token and mark the row running"""
        lock = RunLock(session_factory)

        run_id = lock.acquire()

        assert run_id
        status = lock.status()
        assert status.is_running is True
        assert status.started_at is not None
        assert status.run_id == run_id

    def test_second_acquire_loses(self, session_factory):
        """A held lock must not be acquired again"""
        lock = RunLock(session_factory)

        first = lock.acquire()
        second = lock.acquire()

        assert first is not None
        assert second is None
        assert lock.status().run_id == first

    def test_concurrent_acquire_has_single_winner(self, session_factory):
        """Exactly one of several simultaneous acquires should succeed"""
        workers = 5
        barrier = threading.Barrier(workers)
        lock = RunLock(session_factory)
        results = []
        results_guard = threading.Lock()

        def attempt():
            barrier.wait()
            run_id = lock.acquire()
            with results_guard:
                results.append(run_id)

        threads = [threading.Thread(target=attempt) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == workers
        winners = [r for r in results if r is not None]
        assert len(winners) == 1
        assert lock.status().run_id == winners[0]

    def test_storage_error_propagates(self, tmp_path):
        """acquire() should raise when the lock table is unavailable"""
        engine = make_engine(f"sqlite:///{tmp_path / 'empty.db'}")
        lock = RunLock(sessionmaker(bind=engine))

        with pytest.raises(OperationalError):
            lock.acquire()


class TestRelease:
    """Tests for release() and force_release()"""

    def test_release_frees_lock(self, session_factory):
        """After release another caller can acquire"""
        lock = RunLock(session_factory)
        run_id = lock.acquire()

        assert lock.release(run_id) is True

        status = lock.status()
        assert status.is_running is False
        assert status.run_id is None
        assert lock.acquire() is not None

    def test_unknown_token_is_noop(self, session_factory):
        """A token that never won must not clear the holder's row"""
        lock = RunLock(session_factory)
        holder = lock.acquire()

        assert lock.release("not-a-holder") is False

        status = lock.status()
        assert status.is_running is True
        assert status.run_id == holder

    def test_stale_release_on_shared_instance_keeps_new_holder(self, session_factory):
        """A run reset by the operator must not free the next run's lock"""
        lock = RunLock(session_factory)
        first_run = lock.acquire()
        lock.force_release()
        second_run = lock.acquire()

        assert lock.release(first_run) is False

        status = lock.status()
        assert status.is_running is True
        assert status.run_id == second_run

        assert lock.release(second_run) is True
        assert lock.status().is_running is False

    def test_force_release_clears_any_holder(self, session_factory, db_session):
        """Operator reset should clear a lock left by a crashed process"""
        db_session.query(BackupLock).update({BackupLock.is_running: True, BackupLock.run_id: "crashed"})
        db_session.commit()

        lock = RunLock(session_factory)
        assert lock.acquire() is None

        assert lock.force_release() is True
        assert lock.status().is_running is False
        assert lock.acquire() is not None
