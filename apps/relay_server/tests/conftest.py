from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient
from relay_server.adapters import LocalBlobStore
from relay_server.config import Settings
from relay_server.http import create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        storage_backend="local",
        local_storage_dir=str(tmp_path / "blobs"),
        public_base_url="https://cdn.example.com",
        retry_base_delay=0.0,
        retry_jitter=False,
    )


@pytest.fixture
def store(settings: Settings) -> LocalBlobStore:
    return LocalBlobStore(str(settings.local_storage_path), max_object_size=settings.max_object_size)


@pytest.fixture
def client(settings: Settings, store: LocalBlobStore) -> TestClient:
    return TestClient(create_app(settings=settings, blob_store=store))


@pytest.fixture
def upload(client: TestClient) -> Callable[..., dict]:
    def _upload(content: bytes, filename: str = "file.dat") -> dict:
        response = client.post("/api/upload", files={"file": (filename, content)})
        assert response.status_code == 200, response.text
        return response.json()

    return _upload
