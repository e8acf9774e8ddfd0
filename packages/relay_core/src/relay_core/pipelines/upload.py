from __future__ import annotations

import logging

from relay_core.errors import EmptyPayloadError, PayloadTooLargeError
from relay_core.models import UploadResult
from relay_core.ports import BlobStore
from relay_core.services import RetryPolicy, call_with_retries, detect_type, generate_identifier, storage_key

logger = logging.getLogger(__name__)


def public_url(base_url: str, identifier: str) -> str:
    return f"{base_url.rstrip('/')}/{identifier}"


def upload_blob(
    *,
    original_filename: str | None,
    content: bytes,
    blob_store: BlobStore,
    retry_policy: RetryPolicy,
    namespace: str = "files",
    base_url: str | None = None,
) -> UploadResult:
    if not content:
        raise EmptyPayloadError("Uploaded file is empty")
    if len(content) > blob_store.max_object_size:
        raise PayloadTooLargeError(len(content), blob_store.max_object_size)

    detected = detect_type(content, original_filename)
    identifier = generate_identifier(content, detected.extension, original_filename)
    key = storage_key(identifier, namespace)

    call_with_retries(retry_policy, lambda: blob_store.put(key, content), description=f"upload of {identifier}")
    logger.info("Stored %s (%d bytes, %s, via %s)", identifier, len(content), detected.mime, detected.source.value)

    return UploadResult(
        identifier=identifier,
        size=len(content),
        mime=detected.mime,
        extension=detected.extension,
        detected=detected.source,
        url=public_url(base_url, identifier) if base_url else None,
    )
