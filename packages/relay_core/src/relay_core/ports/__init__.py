from relay_core.ports.blob import BlobStore

__all__ = ["BlobStore"]
