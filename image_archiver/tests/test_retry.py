"""
Tests for RetryPolicy.
"""
import pytest

from image_archiver.services.retry import RetryPolicy


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff waits instead of sleeping"""
    recorded = []
    monkeypatch.setattr("time.sleep", recorded.append)
    return recorded


class TestRetryPolicy:

    def test_returns_first_success(self, sleeps):
        assert RetryPolicy().call(lambda: "ok") == "ok"
        assert sleeps == []

    def test_succeeds_on_third_attempt(self, sleeps):
        """Two failures then a success should return the final value"""
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) < 3:
                raise ConnectionError("reset")
            return "drive-id"

        assert RetryPolicy(factor=0.5, jitter=None).call(flaky) == "drive-id"
        assert len(attempts) == 3
        assert sleeps == [0.5, 1.0]

    def test_exhaustion_reraises_last_error(self, no_sleep_retry):
        """After three failures the last error propagates"""
        attempts = []

        def always_fails():
            attempts.append(1)
            raise ValueError(f"failure {len(attempts)}")

        with pytest.raises(ValueError, match="failure 3"):
            no_sleep_retry.call(always_fails)
        assert len(attempts) == 3

    def test_configured_attempts(self, no_sleep_retry):
        attempts = []

        def always_fails():
            attempts.append(1)
            raise RuntimeError("down")

        with pytest.raises(RuntimeError):
            RetryPolicy(max_attempts=5, factor=0, jitter=None).call(always_fails)
        assert len(attempts) == 5

    def test_passes_arguments(self, no_sleep_retry):
        assert no_sleep_retry.call(lambda a, b=0: a + b, 2, b=3) == 5

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)
