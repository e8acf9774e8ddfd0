from __future__ import annotations

from pydantic import BaseModel


class UploadResponse(BaseModel):
    success: bool = True
    filename: str
    url: str
    size: int
    type: str
    extension: str
    detected: str


class FileInfoResponse(BaseModel):
    filename: str
    size: int
    type: str
    extension: str
    url: str
    sha: str
    download_url: str | None = None


class SupportedTypesResponse(BaseModel):
    version: str
    max_size: int
    categories: dict[str, list[str]]


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
    storage_backend: str


class ErrorResponse(BaseModel):
    error: str
    details: str
