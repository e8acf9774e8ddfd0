from __future__ import annotations

from pydantic import BaseModel, PrivateAttr


class BlobMetadata(BaseModel):
    key: str
    size: int
    fingerprint: str
    locator: str | None = None

    # Body the backend already returned with the lookup, if any.
    _content: bytes | None = PrivateAttr(default=None)

    def attach_content(self, data: bytes) -> BlobMetadata:
        self._content = data
        return self

    @property
    def content(self) -> bytes | None:
        return self._content


class StoredBlob(BaseModel):
    data: bytes
    size: int
    fingerprint: str
