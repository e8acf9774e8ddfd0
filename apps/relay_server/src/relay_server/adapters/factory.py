from __future__ import annotations

import logging
from dataclasses import dataclass

from relay_core.ports import BlobStore

from relay_server.adapters.github_store import GitHubBlobStore
from relay_server.adapters.local_store import LocalBlobStore
from relay_server.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class BlobStoreFactory:
    settings: Settings

    def create_blob_store(self, backend: str | None = None) -> BlobStore:
        selected = (backend or self.settings.storage_backend).lower()
        if selected == "github":
            config = self.settings.github_config()
            if not config.is_complete:
                logger.error("Please set GITHUB_TOKEN, GITHUB_OWNER, and GITHUB_REPO environment variables")
            return GitHubBlobStore(
                config,
                max_object_size=self.settings.max_object_size,
                max_inline_transfer_size=self.settings.max_inline_transfer_size,
                timeout=self.settings.backend_timeout_seconds,
            )
        if selected == "local":
            return LocalBlobStore(
                str(self.settings.local_storage_path),
                max_object_size=self.settings.max_object_size,
            )
        raise ValueError(f"Unsupported storage backend: {selected}")
