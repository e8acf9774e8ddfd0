import base64

import pytest
import requests
from relay_core.errors import BackendError, BackendTimeoutError, BlobNotFoundError, PayloadTooLargeError
from relay_core.models import BlobMetadata
from relay_server.adapters import GitHubBlobStore
from relay_server.config import GitHubConfig

KEY = "files/J-0123abcd0000.txt"
CONTENTS_URL = f"https://api.github.com/repos/octo/cdn/contents/{KEY}"
DOWNLOAD_URL = f"https://raw.githubusercontent.com/octo/cdn/main/{KEY}"


class FakeResponse:
    def __init__(self, status_code: int = 200, json_data: object = None, content: bytes = b"") -> None:
        self.status_code = status_code
        self._json = json_data
        self.content = content

    def json(self) -> object:
        return self._json


class FakeSession:
    def __init__(self, *responses: object) -> None:
        self.responses = list(responses)
        self.requests: list[tuple[str, str, dict]] = []

    def request(self, method: str, url: str, **kwargs: object) -> FakeResponse:
        self.requests.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _file_payload(content: bytes, *, inline: bool = True) -> dict:
    return {
        "type": "file",
        "size": len(content),
        "sha": "abc123",
        "download_url": DOWNLOAD_URL,
        "encoding": "base64" if inline else "none",
        "content": base64.encodebytes(content).decode() if inline else "",
    }


def _store(session: FakeSession, **kwargs) -> GitHubBlobStore:
    config = GitHubConfig(token="ghp_test", owner="octo", repo="cdn", branch="main")
    options = {"max_object_size": 100, "max_inline_transfer_size": 10, "timeout": 5.0}
    options.update(kwargs)
    return GitHubBlobStore(config, session=session, **options)


def test_exists_returns_none_for_missing_key() -> None:
    session = FakeSession(FakeResponse(404))
    assert _store(session).exists(KEY) is None


def test_exists_returns_metadata_and_sends_branch_and_token() -> None:
    session = FakeSession(FakeResponse(200, _file_payload(b"hello")))

    metadata = _store(session).exists(KEY)

    assert metadata.model_dump() == {"key": KEY, "size": 5, "fingerprint": "abc123", "locator": DOWNLOAD_URL}
    assert metadata.content == b"hello"
    method, url, kwargs = session.requests[0]
    assert (method, url) == ("GET", CONTENTS_URL)
    assert kwargs["params"] == {"ref": "main"}
    assert kwargs["headers"]["Authorization"] == "Bearer ghp_test"
    assert kwargs["timeout"] == 5.0


def test_get_metadata_raises_for_missing_key() -> None:
    with pytest.raises(BlobNotFoundError):
        _store(FakeSession(FakeResponse(404))).get_metadata(KEY)


def test_small_objects_are_decoded_inline() -> None:
    session = FakeSession(FakeResponse(200, _file_payload(b"hello")))

    blob = _store(session).get(KEY)

    assert blob.data == b"hello"
    assert blob.fingerprint == "abc123"
    assert len(session.requests) == 1



def test_inline_content_from_lookup_is_reused() -> None:
    session = FakeSession(FakeResponse(200, _file_payload(b"hello")))
    store = _store(session)

    metadata = store.exists(KEY)
    blob = store.get(KEY, metadata=metadata)

    assert blob.data == b"hello"
    assert blob.fingerprint == "abc123"
    assert len(session.requests) == 1


def test_metadata_without_inline_content_fetches_contents() -> None:
    session = FakeSession(FakeResponse(200, _file_payload(b"hello")))
    metadata = BlobMetadata(key=KEY, size=5, fingerprint="abc123", locator=DOWNLOAD_URL)

    blob = _store(session).get(KEY, metadata=metadata)

    assert blob.data == b"hello"
    assert [u for _, u, _ in session.requests] == [CONTENTS_URL]

def test_large_objects_use_direct_download() -> None:
    content = b"x" * 50
    session = FakeSession(FakeResponse(200, content=content))
    metadata = BlobMetadata(key=KEY, size=50, fingerprint="abc123", locator=DOWNLOAD_URL)

    blob = _store(session).get(KEY, metadata=metadata)

    assert blob.data == content
    assert [(m, u) for m, u, _ in session.requests] == [("GET", DOWNLOAD_URL)]


def test_large_objects_without_metadata_look_up_first() -> None:
    content = b"y" * 50
    session = FakeSession(
        FakeResponse(200, _file_payload(content, inline=False)),
        FakeResponse(200, content=content),
    )

    blob = _store(session).get(KEY)

    assert blob.data == content
    assert [u for _, u, _ in session.requests] == [CONTENTS_URL, DOWNLOAD_URL]


def test_truncated_download_is_transient() -> None:
    session = FakeSession(FakeResponse(200, content=b"short"))
    metadata = BlobMetadata(key=KEY, size=50, fingerprint="abc123", locator=DOWNLOAD_URL)

    with pytest.raises(BackendError) as exc_info:
        _store(session).get(KEY, metadata=metadata)
    assert exc_info.value.transient


def test_put_creates_new_file() -> None:
    session = FakeSession(
        FakeResponse(404),
        FakeResponse(201, {"content": {"size": 5, "sha": "new-sha", "download_url": DOWNLOAD_URL}}),
    )

    metadata = _store(session).put(KEY, b"hello")

    assert metadata.fingerprint == "new-sha"
    method, url, kwargs = session.requests[1]
    assert (method, url) == ("PUT", CONTENTS_URL)
    body = kwargs["json"]
    assert body["message"] == "Upload J-0123abcd0000.txt"
    assert body["branch"] == "main"
    assert base64.b64decode(body["content"]) == b"hello"
    assert "sha" not in body


def test_put_replaces_existing_file_with_its_sha() -> None:
    session = FakeSession(
        FakeResponse(200, _file_payload(b"old")),
        FakeResponse(200, {"content": {"size": 5, "sha": "new-sha"}}),
    )

    _store(session).put(KEY, b"hello")

    assert session.requests[1][2]["json"]["sha"] == "abc123"


def test_put_rejects_oversize_payload_before_any_request() -> None:
    session = FakeSession()
    with pytest.raises(PayloadTooLargeError):
        _store(session, max_object_size=4).put(KEY, b"hello")
    assert session.requests == []


def test_server_errors_are_transient_and_client_errors_are_not() -> None:
    with pytest.raises(BackendError) as server_error:
        _store(FakeSession(FakeResponse(502))).exists(KEY)
    with pytest.raises(BackendError) as rate_limited:
        _store(FakeSession(FakeResponse(429))).exists(KEY)
    with pytest.raises(BackendError) as forbidden:
        _store(FakeSession(FakeResponse(403))).exists(KEY)

    assert server_error.value.transient
    assert rate_limited.value.transient
    assert not forbidden.value.transient
    assert forbidden.value.status == 403


def test_put_failure_after_lookup_is_surfaced() -> None:
    session = FakeSession(FakeResponse(404), FakeResponse(422, {"message": "Invalid request"}))
    with pytest.raises(BackendError) as exc_info:
        _store(session).put(KEY, b"hello")
    assert exc_info.value.status == 422


def test_transport_failures_are_classified() -> None:
    with pytest.raises(BackendTimeoutError):
        _store(FakeSession(requests.Timeout("read timed out"))).exists(KEY)
    with pytest.raises(BackendError) as exc_info:
        _store(FakeSession(requests.ConnectionError("reset"))).exists(KEY)
    assert exc_info.value.transient
