"""Turns a stored blob plus an optional ``Range`` header into an HTTP response.

Per request: validate the identifier, confirm the blob exists, fetch the body
(skipped for HEAD), then answer 200 with the whole body, 206 with exactly one
byte slice, or 416 with ``Content-Range: bytes */<size>`` and no body.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from fastapi import Response
from fastapi.responses import StreamingResponse
from relay_core.errors import InvalidIdentifierError, RangeNotSatisfiableError
from relay_core.pipelines import resolve_metadata, retrieve_blob
from relay_core.services import (
    identifier_extension,
    is_forced_text,
    is_valid_identifier,
    mime_for_extension,
    parse_range_header,
    unsatisfiable_content_range,
)
from relay_core.services.mime_types import TEXT_MIME

from relay_server.http.context import AppContext

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=31536000"


def iter_chunks(data: bytes, chunk_size: int) -> Iterator[bytes]:
    view = memoryview(data)
    for offset in range(0, len(view), chunk_size):
        yield bytes(view[offset : offset + chunk_size])


def _base_headers(identifier: str) -> dict[str, str]:
    return {
        "Accept-Ranges": "bytes",
        "Cache-Control": CACHE_CONTROL,
        "Content-Disposition": f'inline; filename="{identifier}"',
        "X-File-Name": identifier,
        "X-Content-Type-Options": "nosniff",
    }


def serve_blob(
    identifier: str,
    *,
    ctx: AppContext,
    range_header: str | None = None,
    force_text: bool = False,
    head: bool = False,
) -> Response:
    if not is_valid_identifier(identifier):
        raise InvalidIdentifierError("File not found")

    extension = identifier_extension(identifier)
    as_text = force_text or is_forced_text(extension)
    media_type = TEXT_MIME if as_text else mime_for_extension(extension)
    namespace = ctx.settings.storage_prefix

    data: bytes | None = None
    if head:
        size = resolve_metadata(
            identifier,
            blob_store=ctx.blob_store,
            retry_policy=ctx.retrieval_retry,
            namespace=namespace,
        ).size
    else:
        _, blob = retrieve_blob(
            identifier,
            blob_store=ctx.blob_store,
            retry_policy=ctx.retrieval_retry,
            namespace=namespace,
        )
        data = blob.data
        size = blob.size

    headers = _base_headers(identifier)

    if not as_text:
        try:
            byte_range = parse_range_header(range_header, size)
        except RangeNotSatisfiableError:
            logger.info("Unsatisfiable range %r for %s (%d bytes)", range_header, identifier, size)
            headers["Content-Range"] = unsatisfiable_content_range(size)
            return Response(status_code=416, headers=headers)
        if byte_range is not None:
            headers["Content-Range"] = byte_range.content_range(size)
            headers["Content-Length"] = str(byte_range.length)
            body = b"" if data is None else data[byte_range.start : byte_range.end + 1]
            return Response(content=body, status_code=206, media_type=media_type, headers=headers)

    headers["Content-Length"] = str(size)
    if data is None:
        return Response(status_code=200, media_type=media_type, headers=headers)
    if size > ctx.settings.stream_chunk_threshold:
        return StreamingResponse(
            iter_chunks(data, ctx.settings.stream_chunk_size),
            status_code=200,
            media_type=media_type,
            headers=headers,
        )
    return Response(content=data, status_code=200, media_type=media_type, headers=headers)
