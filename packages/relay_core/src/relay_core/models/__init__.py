from relay_core.models.blob import BlobMetadata, StoredBlob
from relay_core.models.upload import DetectedType, DetectionSource, UploadResult

__all__ = [
    "BlobMetadata",
    "DetectedType",
    "DetectionSource",
    "StoredBlob",
    "UploadResult",
]
