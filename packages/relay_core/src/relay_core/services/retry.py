from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
    wait_random_exponential,
)

from relay_core.errors import (
    BackendError,
    BackendTimeoutError,
    BlobUnavailableError,
    StorageTimeoutError,
    is_transient,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

WaitStrategy = Callable[[RetryCallState], float]


def exponential_backoff(base: float = 0.5, cap: float = 8.0, jitter: bool = True) -> WaitStrategy:
    if jitter:
        return wait_random_exponential(multiplier=base, max=cap)
    return wait_exponential(multiplier=base, max=cap)


def _log_retry(description: str, max_attempts: int) -> Callable[[RetryCallState], None]:
    def _before_sleep(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "%s failed (attempt %d/%d): %s; retrying in %.2fs",
            description,
            retry_state.attempt_number,
            max_attempts,
            exc,
            delay,
        )

    return _before_sleep


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry shared by uploads and retrievals.

    ``deadline`` bounds the total time spent across attempts; once it has
    passed no further attempt is made and the last error is re-raised.
    """

    max_attempts: int = 3
    wait: WaitStrategy = field(default_factory=exponential_backoff)
    retryable: Callable[[BaseException], bool] = is_transient
    deadline: float | None = None
    sleep: Callable[[float], None] = time.sleep

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def _retrying(self, description: str) -> Retrying:
        stop = stop_after_attempt(self.max_attempts)
        if self.deadline is not None:
            stop = stop | stop_after_delay(self.deadline)
        return Retrying(
            stop=stop,
            wait=self.wait,
            retry=retry_if_exception(self.retryable),
            sleep=self.sleep,
            before_sleep=_log_retry(description, self.max_attempts),
            reraise=True,
        )

    def call(self, fn: Callable[[], T], *, description: str = "backend call") -> T:
        try:
            return self._retrying(description)(fn)
        except Exception as exc:
            if self.retryable(exc):
                logger.error("%s gave up: %s", description, exc)
            raise


def call_with_retries(retry_policy: RetryPolicy, fn: Callable[[], T], *, description: str) -> T:
    """Run ``fn`` under ``retry_policy`` and classify what is left when retries run out.

    Exhausted timeouts become :class:`StorageTimeoutError`, other exhausted
    transient failures :class:`BlobUnavailableError`. Permanent backend errors
    and domain errors pass through unchanged.
    """
    try:
        return retry_policy.call(fn, description=description)
    except BackendError as exc:
        if not exc.transient:
            raise
        if isinstance(exc, BackendTimeoutError):
            raise StorageTimeoutError(f"Storage backend timed out during {description}") from exc
        raise BlobUnavailableError(f"Storage backend unavailable during {description}") from exc
