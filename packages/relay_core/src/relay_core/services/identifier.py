"""Short public identifiers for stored blobs.

An identifier has the shape ``J-<8 hex digest chars><4 base-36 time chars>.<ext>``
and doubles as the storage key under the ``files/`` namespace, so
:func:`is_valid_identifier` is the only gate between request paths and
backend keys.
"""

from __future__ import annotations

import re
import time
from hashlib import md5
from pathlib import PurePosixPath

from relay_core.errors import InvalidIdentifierError

PREFIX = "J-"
FALLBACK_EXTENSION = "bin"
DEFAULT_NAMESPACE = "files"

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_EXTENSION_RE = re.compile(r"[A-Za-z0-9]{1,10}")
_IDENTIFIER_RE = re.compile(r"J-[a-f0-9]{8}[a-z0-9]{4}\.[a-z0-9]{1,10}", re.IGNORECASE)


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def _clean_extension(value: str | None) -> str | None:
    if not value:
        return None
    candidate = value.strip().lstrip(".").lower()
    if not _EXTENSION_RE.fullmatch(candidate):
        return None
    return candidate


def resolve_extension(declared_extension: str | None, original_filename: str | None) -> str:
    declared = _clean_extension(declared_extension)
    if declared and declared != FALLBACK_EXTENSION:
        return declared
    if original_filename:
        from_name = _clean_extension(PurePosixPath(original_filename.replace("\\", "/")).suffix)
        if from_name:
            return from_name
    return FALLBACK_EXTENSION


def content_digest(content: bytes) -> str:
    # Public names, not a security boundary.
    return md5(content, usedforsecurity=False).hexdigest()[:8]


def timestamp_segment(now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return _base36(now_ms)[-4:].rjust(4, "0")


def generate_identifier(
    content: bytes,
    declared_extension: str | None = None,
    original_filename: str | None = None,
    *,
    now_ms: int | None = None,
) -> str:
    extension = resolve_extension(declared_extension, original_filename)
    return f"{PREFIX}{content_digest(content)}{timestamp_segment(now_ms)}.{extension}"


def is_valid_identifier(value: str | None) -> bool:
    if not value or "/" in value or "\\" in value or ".." in value:
        return False
    return _IDENTIFIER_RE.fullmatch(value) is not None


def identifier_extension(identifier: str) -> str:
    return identifier.rsplit(".", 1)[-1].lower()


def storage_key(identifier: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    if not is_valid_identifier(identifier):
        raise InvalidIdentifierError(f"Invalid file identifier: {identifier!r}")
    return f"{namespace}/{identifier}"
