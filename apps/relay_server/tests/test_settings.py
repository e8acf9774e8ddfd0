import pytest
from relay_server.adapters import BlobStoreFactory, GitHubBlobStore, LocalBlobStore
from relay_server.config import Settings


def test_github_config_is_built_from_settings() -> None:
    settings = Settings(github_token="t", github_owner="octo", github_repo="cdn", github_branch="assets")
    config = settings.github_config()

    assert config.is_complete
    assert (config.owner, config.repo, config.branch) == ("octo", "cdn", "assets")


def test_incomplete_github_config() -> None:
    settings = Settings(github_token=None, github_owner="octo", github_repo=None)
    assert not settings.github_config().is_complete


def test_factory_defaults_to_github() -> None:
    settings = Settings(storage_backend="github", github_token="t", github_owner="o", github_repo="r")
    store = BlobStoreFactory(settings).create_blob_store()

    assert isinstance(store, GitHubBlobStore)
    assert store.max_object_size == 100 * 1024 * 1024
    assert store.max_inline_transfer_size == 1024 * 1024


def test_factory_supports_local_backend(tmp_path) -> None:
    settings = Settings(storage_backend="local", local_storage_dir=str(tmp_path))
    assert isinstance(BlobStoreFactory(settings).create_blob_store(), LocalBlobStore)


def test_factory_rejects_unknown_backend() -> None:
    with pytest.raises(ValueError):
        BlobStoreFactory(Settings()).create_blob_store(backend="s3")


def test_production_flag() -> None:
    assert Settings(app_env="Production").is_production
    assert not Settings().is_production
