from __future__ import annotations


class RelayError(Exception):
    """Base class for domain exceptions.

    ``kind`` is the machine-readable name rendered to clients and
    ``status_code`` is the HTTP status the outer layer maps it to.
    """

    kind = "relay_error"
    status_code = 500


class InvalidIdentifierError(RelayError):
    kind = "not_found"
    status_code = 404


class EmptyPayloadError(RelayError):
    kind = "empty_payload"
    status_code = 400


class PayloadTooLargeError(RelayError):
    kind = "too_large"
    status_code = 413

    def __init__(self, size: int | None, limit: int) -> None:
        if size is None:
            super().__init__(f"Payload exceeds the {limit} byte limit")
        else:
            super().__init__(f"Payload of {size} bytes exceeds the {limit} byte limit")
        self.size = size
        self.limit = limit


class BlobNotFoundError(RelayError):
    kind = "not_found"
    status_code = 404


class BlobUnavailableError(RelayError):
    kind = "unavailable"
    status_code = 503


class StorageTimeoutError(BlobUnavailableError):
    kind = "timeout"
    status_code = 408


class RangeNotSatisfiableError(RelayError):
    kind = "range_not_satisfiable"
    status_code = 416

    def __init__(self, size: int, header: str) -> None:
        super().__init__(f"Range {header!r} is outside a {size} byte blob")
        self.size = size
        self.header = header


class BackendError(RelayError):
    kind = "backend_error"
    status_code = 502

    def __init__(self, message: str, *, status: int | None = None, transient: bool = False) -> None:
        super().__init__(message)
        self.status = status
        self.transient = transient


class BackendTimeoutError(BackendError):
    def __init__(self, message: str) -> None:
        super().__init__(message, transient=True)


def is_transient(exc: BaseException) -> bool:
    return isinstance(exc, BackendError) and exc.transient


__all__ = [
    "BackendError",
    "BackendTimeoutError",
    "BlobNotFoundError",
    "BlobUnavailableError",
    "EmptyPayloadError",
    "InvalidIdentifierError",
    "PayloadTooLargeError",
    "RangeNotSatisfiableError",
    "RelayError",
    "StorageTimeoutError",
    "is_transient",
]
