from __future__ import annotations

from pathlib import Path

from image_storage.core.errors import UploadError

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def get_content_type(file_name: str) -> str:
    ext = Path(file_name).suffix.lower()
    mapping = {
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".png": "image/png",
        ".gif": "image/gif",
        ".webp": "image/webp",
        ".avif": "image/avif",
        ".svg": "image/svg+xml",
        ".svgz": "image/svg+xml",
        ".ico": "image/x-icon",
        ".bmp": "image/bmp",
        ".tif": "image/tiff",
        ".tiff": "image/tiff",
        ".heic": "image/heic",
    }
    return mapping.get(ext, DEFAULT_CONTENT_TYPE)


def safe_read_file(file_path: str, object_key: str) -> bytes:
    """Read a local upload into memory, reporting failures against the target key."""
    try:
        with open(file_path, "rb") as handle:
            return handle.read()
    except FileNotFoundError as exc:
        raise UploadError(object_key, f"Upload source not found: {file_path}") from exc
    except PermissionError as exc:
        raise UploadError(object_key, f"Permission denied: {file_path}") from exc
    except OSError as exc:
        raise UploadError(object_key, f"Failed to read upload source: {file_path}") from exc
