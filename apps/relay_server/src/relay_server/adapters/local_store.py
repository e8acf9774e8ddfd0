from __future__ import annotations

from hashlib import sha1
from pathlib import Path

from relay_core.errors import BackendError, BlobNotFoundError, PayloadTooLargeError
from relay_core.models import BlobMetadata, StoredBlob

_HASH_CHUNK_SIZE = 1024 * 1024


def git_blob_sha(data: bytes) -> str:
    """SHA-1 of the Git blob object for ``data``, the fingerprint GitHub reports."""
    return sha1(b"blob %d\0" % len(data) + data, usedforsecurity=False).hexdigest()


def _sidecar(path: Path) -> Path:
    return path.with_name(path.name + ".sha1")


class LocalBlobStore:
    def __init__(
        self,
        base_dir: str,
        *,
        max_object_size: int,
        max_inline_transfer_size: int | None = None,
    ) -> None:
        self._base_dir = Path(base_dir).resolve()
        self._base_dir.mkdir(parents=True, exist_ok=True)
        self.max_object_size = max_object_size
        self.max_inline_transfer_size = max_inline_transfer_size

    def _path(self, key: str) -> Path:
        path = (self._base_dir / key).resolve()
        if not path.is_relative_to(self._base_dir):
            raise BackendError(f"Key escapes storage directory: {key}")
        return path

    def exists(self, key: str) -> BlobMetadata | None:
        path = self._path(key)
        if not path.is_file():
            return None
        size = path.stat().st_size
        return BlobMetadata(key=key, size=size, fingerprint=self._fingerprint(path, size), locator=path.as_uri())

    def _fingerprint(self, path: Path, size: int) -> str:
        sidecar = _sidecar(path)
        if sidecar.is_file():
            return sidecar.read_text(encoding="ascii").strip()
        # Objects written outside put(): hash in chunks and cache the result.
        digest = sha1(b"blob %d\0" % size, usedforsecurity=False)
        with path.open("rb") as fh:
            for chunk in iter(lambda: fh.read(_HASH_CHUNK_SIZE), b""):
                digest.update(chunk)
        fingerprint = digest.hexdigest()
        sidecar.write_text(fingerprint, encoding="ascii")
        return fingerprint

    def get_metadata(self, key: str) -> BlobMetadata:
        metadata = self.exists(key)
        if metadata is None:
            raise BlobNotFoundError(f"No object stored under {key}")
        return metadata

    def get(self, key: str, *, metadata: BlobMetadata | None = None) -> StoredBlob:
        path = self._path(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError as exc:
            raise BlobNotFoundError(f"No object stored under {key}") from exc
        return StoredBlob(data=data, size=len(data), fingerprint=git_blob_sha(data))

    def put(self, key: str, data: bytes) -> BlobMetadata:
        if len(data) > self.max_object_size:
            raise PayloadTooLargeError(len(data), self.max_object_size)
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fingerprint = git_blob_sha(data)
        path.write_bytes(data)
        _sidecar(path).write_text(fingerprint, encoding="ascii")
        return BlobMetadata(key=key, size=len(data), fingerprint=fingerprint, locator=path.as_uri())
