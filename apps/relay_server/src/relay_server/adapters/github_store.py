"""Blob storage on top of the GitHub repository contents API.

Objects live at ``<prefix>/<identifier>`` on one branch of one repository.
The contents endpoint returns base64 content inline only for objects up to
1 MiB; larger objects are fetched through their ``download_url``.
"""

from __future__ import annotations

import base64
import logging
from typing import Any
from urllib.parse import quote

import requests

from relay_core.errors import (
    BackendError,
    BackendTimeoutError,
    BlobNotFoundError,
    PayloadTooLargeError,
)
from relay_core.models import BlobMetadata, StoredBlob
from relay_server.config import GitHubConfig

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
JSON_MEDIA_TYPE = "application/vnd.github+json"


def _is_transient_status(status: int) -> bool:
    return status == 429 or status >= 500


class GitHubBlobStore:
    def __init__(
        self,
        config: GitHubConfig,
        *,
        max_object_size: int,
        max_inline_transfer_size: int | None,
        timeout: float,
        session: requests.Session | None = None,
    ) -> None:
        self._config = config
        self._api_url = config.api_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self.max_object_size = max_object_size
        self.max_inline_transfer_size = max_inline_transfer_size

    def _contents_url(self, key: str) -> str:
        return f"{self._api_url}/repos/{self._config.owner}/{self._config.repo}/contents/{quote(key)}"

    def _headers(self, accept: str = JSON_MEDIA_TYPE) -> dict[str, str]:
        headers = {
            "Accept": accept,
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": "blob-relay",
        }
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        return headers

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.Timeout as exc:
            raise BackendTimeoutError(f"{method} {url} timed out after {self._timeout}s") from exc
        except requests.RequestException as exc:
            raise BackendError(f"{method} {url} failed: {exc}", transient=True) from exc

    def _check(self, response: requests.Response, action: str) -> None:
        if 200 <= response.status_code < 300:
            return
        status = response.status_code
        logger.warning("GitHub %s returned HTTP %d", action, status)
        raise BackendError(
            f"GitHub {action} failed with HTTP {status}",
            status=status,
            transient=_is_transient_status(status),
        )

    def _fetch_contents(self, key: str) -> dict[str, Any] | None:
        response = self._request(
            "GET",
            self._contents_url(key),
            params={"ref": self._config.branch},
            headers=self._headers(),
        )
        if response.status_code == 404:
            return None
        self._check(response, f"lookup of {key}")
        payload = response.json()
        if not isinstance(payload, dict) or payload.get("type", "file") != "file":
            raise BackendError(f"{key} is not a file in {self._config.owner}/{self._config.repo}")
        return payload

    def _metadata(self, key: str, payload: dict[str, Any]) -> BlobMetadata:
        metadata = BlobMetadata(
            key=key,
            size=int(payload.get("size", 0)),
            fingerprint=payload.get("sha", ""),
            locator=payload.get("download_url"),
        )
        encoded = payload.get("content") or ""
        if payload.get("encoding") == "base64" and (encoded or metadata.size == 0):
            metadata.attach_content(base64.b64decode(encoded))
        return metadata

    def exists(self, key: str) -> BlobMetadata | None:
        payload = self._fetch_contents(key)
        if payload is None:
            return None
        return self._metadata(key, payload)

    def get_metadata(self, key: str) -> BlobMetadata:
        metadata = self.exists(key)
        if metadata is None:
            raise BlobNotFoundError(f"No object stored under {key}")
        return metadata

    def get(self, key: str, *, metadata: BlobMetadata | None = None) -> StoredBlob:
        inline_limit = self.max_inline_transfer_size
        if metadata is None or metadata.content is None:
            if metadata is not None and inline_limit is not None and metadata.size > inline_limit:
                return self._download(metadata)
            payload = self._fetch_contents(key)
            if payload is None:
                raise BlobNotFoundError(f"No object stored under {key}")
            metadata = self._metadata(key, payload)

        data = metadata.content
        if data is None:
            # GitHub omits inline content for large files and in some cases even for small ones.
            return self._download(metadata)
        return StoredBlob(data=data, size=len(data), fingerprint=metadata.fingerprint)

    def _download(self, metadata: BlobMetadata) -> StoredBlob:
        if metadata.locator:
            response = self._request("GET", metadata.locator, headers=self._headers(accept="*/*"))
        else:
            response = self._request(
                "GET",
                self._contents_url(metadata.key),
                params={"ref": self._config.branch},
                headers=self._headers(accept="application/vnd.github.raw"),
            )
        if response.status_code == 404:
            raise BlobNotFoundError(f"No object stored under {metadata.key}")
        self._check(response, f"download of {metadata.key}")

        data = response.content
        if len(data) != metadata.size:
            raise BackendError(
                f"Download of {metadata.key} returned {len(data)} of {metadata.size} bytes",
                transient=True,
            )
        return StoredBlob(data=data, size=len(data), fingerprint=metadata.fingerprint)

    def put(self, key: str, data: bytes) -> BlobMetadata:
        if len(data) > self.max_object_size:
            raise PayloadTooLargeError(len(data), self.max_object_size)

        # Replacing an existing file requires its current blob sha.
        existing = self._fetch_contents(key)
        body: dict[str, Any] = {
            "message": f"Upload {key.rsplit('/', 1)[-1]}",
            "content": base64.b64encode(data).decode("ascii"),
            "branch": self._config.branch,
        }
        if existing is not None:
            body["sha"] = existing["sha"]

        response = self._request("PUT", self._contents_url(key), json=body, headers=self._headers())
        self._check(response, f"upload of {key}")

        content = response.json().get("content") or {}
        return BlobMetadata(
            key=key,
            size=int(content.get("size", len(data))),
            fingerprint=content.get("sha", ""),
            locator=content.get("download_url"),
        )
