from relay_core.services.detection import detect_type
from relay_core.services.identifier import (
    generate_identifier,
    identifier_extension,
    is_valid_identifier,
    resolve_extension,
    storage_key,
)
from relay_core.services.mime_types import (
    SUPPORTED_TYPES,
    TABLE_VERSION,
    is_forced_text,
    lookup_mime,
    mime_for_extension,
)
from relay_core.services.ranges import ByteRange, parse_range_header, unsatisfiable_content_range
from relay_core.services.retry import RetryPolicy, call_with_retries, exponential_backoff

__all__ = [
    "SUPPORTED_TYPES",
    "TABLE_VERSION",
    "ByteRange",
    "RetryPolicy",
    "call_with_retries",
    "detect_type",
    "exponential_backoff",
    "generate_identifier",
    "identifier_extension",
    "is_forced_text",
    "is_valid_identifier",
    "lookup_mime",
    "mime_for_extension",
    "parse_range_header",
    "resolve_extension",
    "storage_key",
    "unsatisfiable_content_range",
]
