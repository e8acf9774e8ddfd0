from relay_core.pipelines.retrieval import resolve_metadata, retrieve_blob
from relay_core.pipelines.upload import public_url, upload_blob

__all__ = [
    "public_url",
    "resolve_metadata",
    "retrieve_blob",
    "upload_blob",
]
