from relay_server.adapters.factory import BlobStoreFactory
from relay_server.adapters.github_store import GitHubBlobStore
from relay_server.adapters.local_store import LocalBlobStore, git_blob_sha

__all__ = [
    "BlobStoreFactory",
    "GitHubBlobStore",
    "LocalBlobStore",
    "git_blob_sha",
]
