from __future__ import annotations

from relay_core.errors import BlobNotFoundError
from relay_core.models import BlobMetadata, StoredBlob
from relay_core.ports import BlobStore
from relay_core.services import RetryPolicy, call_with_retries, storage_key


def resolve_metadata(
    identifier: str,
    *,
    blob_store: BlobStore,
    retry_policy: RetryPolicy,
    namespace: str = "files",
) -> BlobMetadata:
    key = storage_key(identifier, namespace)

    def _lookup() -> BlobMetadata:
        metadata = blob_store.exists(key)
        if metadata is None:
            raise BlobNotFoundError(f"File not found: {identifier}")
        return metadata

    return call_with_retries(retry_policy, _lookup, description=f"metadata lookup of {identifier}")


def retrieve_blob(
    identifier: str,
    *,
    blob_store: BlobStore,
    retry_policy: RetryPolicy,
    namespace: str = "files",
) -> tuple[BlobMetadata, StoredBlob]:
    """Confirm the blob exists, then fetch its body.

    Absence is reported as :class:`BlobNotFoundError` without attempting the
    body fetch. Transient backend failures are retried as a whole sequence;
    once retries run out the failure surfaces as unavailability, never as
    not-found.
    """
    key = storage_key(identifier, namespace)

    def _fetch() -> tuple[BlobMetadata, StoredBlob]:
        metadata = blob_store.exists(key)
        if metadata is None:
            raise BlobNotFoundError(f"File not found: {identifier}")
        return metadata, blob_store.get(key, metadata=metadata)

    return call_with_retries(retry_policy, _fetch, description=f"retrieval of {identifier}")
