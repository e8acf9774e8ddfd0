"""The single extension to MIME table used for upload reporting and serving."""

from __future__ import annotations

from types import MappingProxyType

TABLE_VERSION = "2"
DEFAULT_MIME = "application/octet-stream"
TEXT_MIME = "text/plain; charset=utf-8"

# Extensions whose content must never be served with its native type.
FORCED_TEXT_EXTENSIONS = frozenset({"html", "htm"})

EXTENSION_MIME_TYPES = MappingProxyType(
    {
        # images
        "jpg": "image/jpeg",
        "jpeg": "image/jpeg",
        "png": "image/png",
        "gif": "image/gif",
        "webp": "image/webp",
        "bmp": "image/bmp",
        "ico": "image/x-icon",
        "svg": "image/svg+xml",
        "tif": "image/tiff",
        "tiff": "image/tiff",
        "avif": "image/avif",
        "heic": "image/heic",
        # video
        "mp4": "video/mp4",
        "m4v": "video/mp4",
        "webm": "video/webm",
        "mkv": "video/x-matroska",
        "mov": "video/quicktime",
        "avi": "video/x-msvideo",
        "flv": "video/x-flv",
        "wmv": "video/x-ms-wmv",
        "3gp": "video/3gpp",
        "ts": "video/mp2t",
        # audio
        "mp3": "audio/mpeg",
        "wav": "audio/wav",
        "ogg": "audio/ogg",
        "oga": "audio/ogg",
        "flac": "audio/flac",
        "aac": "audio/aac",
        "m4a": "audio/mp4",
        "opus": "audio/opus",
        "mid": "audio/midi",
        # documents
        "pdf": "application/pdf",
        "doc": "application/msword",
        "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "xls": "application/vnd.ms-excel",
        "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "ppt": "application/vnd.ms-powerpoint",
        "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        "odt": "application/vnd.oasis.opendocument.text",
        "rtf": "application/rtf",
        "epub": "application/epub+zip",
        # text and code
        "txt": "text/plain",
        "md": "text/markdown",
        "csv": "text/csv",
        "html": "text/html",
        "htm": "text/html",
        "css": "text/css",
        "js": "text/javascript",
        "mjs": "text/javascript",
        "json": "application/json",
        "xml": "application/xml",
        "yaml": "application/yaml",
        "yml": "application/yaml",
        "py": "text/x-python",
        "php": "application/x-httpd-php",
        "sh": "application/x-sh",
        # archives
        "zip": "application/zip",
        "gz": "application/gzip",
        "tar": "application/x-tar",
        "rar": "application/vnd.rar",
        "7z": "application/x-7z-compressed",
        "bz2": "application/x-bzip2",
        "xz": "application/x-xz",
        # fonts
        "woff": "font/woff",
        "woff2": "font/woff2",
        "ttf": "font/ttf",
        "otf": "font/otf",
        # other
        "wasm": "application/wasm",
        "apk": "application/vnd.android.package-archive",
        "exe": "application/vnd.microsoft.portable-executable",
        "bin": DEFAULT_MIME,
    }
)

SUPPORTED_TYPES = MappingProxyType(
    {
        "images": ("jpg", "jpeg", "png", "gif", "webp", "bmp", "ico", "svg", "tiff", "avif", "heic"),
        "videos": ("mp4", "m4v", "webm", "mkv", "mov", "avi", "flv", "wmv", "3gp"),
        "audio": ("mp3", "wav", "ogg", "flac", "aac", "m4a", "opus", "mid"),
        "documents": ("pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "odt", "rtf", "epub"),
        "text": ("txt", "md", "csv", "html", "css", "js", "json", "xml", "yaml", "py"),
        "archives": ("zip", "gz", "tar", "rar", "7z", "bz2", "xz"),
        "fonts": ("woff", "woff2", "ttf", "otf"),
    }
)


def lookup_mime(extension: str | None) -> str | None:
    if not extension:
        return None
    return EXTENSION_MIME_TYPES.get(extension.lstrip(".").lower())


def mime_for_extension(extension: str | None) -> str:
    return lookup_mime(extension) or DEFAULT_MIME


def is_forced_text(extension: str | None) -> bool:
    return bool(extension) and extension.lower() in FORCED_TEXT_EXTENSIONS
