"""
Bounded retry for file transfers, built on the backoff library.
"""
from typing import Callable, Optional, TypeVar

import backoff

from image_archiver.constants import TRANSFER_MAX_ATTEMPTS

T = TypeVar("T")


class RetryPolicy:
    """
    Call a function up to max_attempts times with exponential backoff.

    factor and jitter are handed to backoff.expo / on_exception; the defaults
    are the library's own. The last error is re-raised once attempts run out.
    """

    def __init__(
        self,
        max_attempts: int = TRANSFER_MAX_ATTEMPTS,
        factor: float = 1,
        jitter: Optional[Callable[[float], float]] = backoff.full_jitter
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.factor = factor
        self.jitter = jitter

    def call(self, func: Callable[..., T], *args, **kwargs) -> T:
        retrying = backoff.on_exception(
            backoff.expo,
            Exception,
            max_tries=self.max_attempts,
            jitter=self.jitter,
            logger="image_archiver.retry",
            factor=self.factor
        )(func)
        return retrying(*args, **kwargs)
