from relay_core.models import (
    BlobMetadata,
    DetectedType,
    DetectionSource,
    StoredBlob,
    UploadResult,
)

__version__ = "1.1.0"

__all__ = [
    "BlobMetadata",
    "DetectedType",
    "DetectionSource",
    "StoredBlob",
    "UploadResult",
    "__version__",
]
