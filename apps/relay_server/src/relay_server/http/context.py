from __future__ import annotations

from dataclasses import dataclass

from relay_core.ports import BlobStore
from relay_core.services import RetryPolicy, exponential_backoff

from relay_server.config import Settings


def build_retry_policy(settings: Settings, max_attempts: int) -> RetryPolicy:
    return RetryPolicy(
        max_attempts=max_attempts,
        wait=exponential_backoff(
            base=settings.retry_base_delay,
            cap=settings.retry_max_delay,
            jitter=settings.retry_jitter,
        ),
        deadline=settings.request_timeout_seconds,
    )


@dataclass
class AppContext:
    settings: Settings
    blob_store: BlobStore
    upload_retry: RetryPolicy
    retrieval_retry: RetryPolicy
