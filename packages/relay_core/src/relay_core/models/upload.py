from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class DetectionSource(str, Enum):
    MAGIC = "magic"
    FILENAME = "filename"
    FALLBACK = "fallback"


class DetectedType(BaseModel):
    extension: str
    mime: str
    source: DetectionSource


class UploadResult(BaseModel):
    identifier: str
    size: int
    mime: str
    extension: str
    detected: DetectionSource
    url: str | None = None
