from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024


class GitHubConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str | None
    owner: str | None
    repo: str | None
    branch: str = "main"
    api_url: str = "https://api.github.com"

    @property
    def is_complete(self) -> bool:
        return bool(self.token and self.owner and self.repo)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_host: str = "0.0.0.0"
    app_port: int = 3000
    app_env: str = "development"
    log_level: str = "INFO"
    public_base_url: str | None = None
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    storage_backend: str = "github"
    storage_prefix: str = "files"
    local_storage_dir: str = "./data"

    github_token: str | None = None
    github_owner: str | None = None
    github_repo: str | None = None
    github_branch: str = "main"
    github_api_url: str = "https://api.github.com"

    max_object_size: int = 100 * MIB
    max_inline_transfer_size: int = 1 * MIB
    backend_timeout_seconds: float = 300.0
    request_timeout_seconds: float = 600.0

    upload_max_attempts: int = 3
    retrieval_max_attempts: int = 3
    retry_base_delay: float = 0.5
    retry_max_delay: float = 8.0
    retry_jitter: bool = True

    stream_chunk_threshold: int = 5 * MIB
    stream_chunk_size: int = 1 * MIB

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def local_storage_path(self) -> Path:
        return Path(self.local_storage_dir).resolve()

    def github_config(self) -> GitHubConfig:
        return GitHubConfig(
            token=self.github_token,
            owner=self.github_owner,
            repo=self.github_repo,
            branch=self.github_branch,
            api_url=self.github_api_url,
        )
