from typing import Protocol

from relay_core.models import BlobMetadata, StoredBlob


class BlobStore(Protocol):
    max_object_size: int
    max_inline_transfer_size: int | None

    def exists(self, key: str) -> BlobMetadata | None: ...

    def get_metadata(self, key: str) -> BlobMetadata: ...

    def get(self, key: str, *, metadata: BlobMetadata | None = None) -> StoredBlob: ...

    def put(self, key: str, data: bytes) -> BlobMetadata: ...
