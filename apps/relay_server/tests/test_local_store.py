from pathlib import Path

import pytest
from relay_core.errors import BackendError, BlobNotFoundError, PayloadTooLargeError
from relay_server.adapters import LocalBlobStore, git_blob_sha


def test_git_blob_sha_matches_git() -> None:
    assert git_blob_sha(b"hello\n") == "ce013625030ba8dba906f756967f9e9ca394464a"


def test_put_get_and_exists(tmp_path) -> None:
    store = LocalBlobStore(str(tmp_path), max_object_size=1024)
    key = "files/J-0123abcd0000.txt"

    assert store.exists(key) is None
    stored = store.put(key, b"hello\n")
    metadata = store.get_metadata(key)
    blob = store.get(key)

    assert stored.fingerprint == metadata.fingerprint == blob.fingerprint
    assert metadata.size == 6
    assert blob.data == b"hello\n"
    assert (tmp_path / "files" / "J-0123abcd0000.txt").read_bytes() == b"hello\n"


def test_put_replaces_existing_content(tmp_path) -> None:
    store = LocalBlobStore(str(tmp_path), max_object_size=1024)
    store.put("files/a.txt", b"one")
    store.put("files/a.txt", b"two")
    assert store.get("files/a.txt").data == b"two"


def test_missing_and_oversize(tmp_path) -> None:
    store = LocalBlobStore(str(tmp_path), max_object_size=3)
    with pytest.raises(BlobNotFoundError):
        store.get("files/missing.bin")
    with pytest.raises(BlobNotFoundError):
        store.get_metadata("files/missing.bin")
    with pytest.raises(PayloadTooLargeError):
        store.put("files/big.bin", b"1234")


def test_keys_cannot_escape_base_dir(tmp_path) -> None:
    store = LocalBlobStore(str(tmp_path / "root"), max_object_size=1024)
    with pytest.raises(BackendError):
        store.put("../outside.txt", b"x")


def test_exists_uses_stored_fingerprint_without_reading_body(tmp_path, monkeypatch) -> None:
    store = LocalBlobStore(str(tmp_path), max_object_size=1024)
    store.put("files/a.txt", b"hello\n")

    def fail_read_bytes(self: Path) -> bytes:
        raise AssertionError(f"unexpected body read of {self}")

    monkeypatch.setattr(Path, "read_bytes", fail_read_bytes)
    metadata = store.exists("files/a.txt")

    assert metadata is not None
    assert metadata.size == 6
    assert metadata.fingerprint == git_blob_sha(b"hello\n")


def test_fingerprint_is_computed_for_files_written_elsewhere(tmp_path) -> None:
    store = LocalBlobStore(str(tmp_path), max_object_size=1024)
    (tmp_path / "files").mkdir()
    (tmp_path / "files" / "b.txt").write_bytes(b"hello\n")

    metadata = store.get_metadata("files/b.txt")

    assert metadata.fingerprint == "ce013625030ba8dba906f756967f9e9ca394464a"
    assert (tmp_path / "files" / "b.txt.sha1").read_text() == metadata.fingerprint
