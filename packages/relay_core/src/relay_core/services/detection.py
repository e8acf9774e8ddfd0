from __future__ import annotations

import logging

import filetype

from relay_core.models import DetectedType, DetectionSource
from relay_core.services.identifier import FALLBACK_EXTENSION, resolve_extension
from relay_core.services.mime_types import DEFAULT_MIME, lookup_mime

logger = logging.getLogger(__name__)


def detect_type(content: bytes, filename: str | None = None) -> DetectedType:
    """Sniff magic bytes first, then the filename extension, then give up to ``bin``.

    The reported MIME type comes from the shared extension table whenever it
    knows the extension so that upload responses agree with what is served.
    """
    kind = None
    try:
        kind = filetype.guess(content)
    except (TypeError, ValueError) as exc:
        logger.debug("Magic byte sniffing failed: %s", exc)

    if kind is not None:
        extension = resolve_extension(kind.extension, None)
        if extension != FALLBACK_EXTENSION:
            return DetectedType(
                extension=extension,
                mime=lookup_mime(extension) or kind.mime,
                source=DetectionSource.MAGIC,
            )

    extension = resolve_extension(None, filename)
    if extension != FALLBACK_EXTENSION:
        return DetectedType(
            extension=extension,
            mime=lookup_mime(extension) or DEFAULT_MIME,
            source=DetectionSource.FILENAME,
        )

    return DetectedType(extension=FALLBACK_EXTENSION, mime=DEFAULT_MIME, source=DetectionSource.FALLBACK)
