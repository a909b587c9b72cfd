"""Conversions between target directories, object keys and public asset URLs."""

from __future__ import annotations

import posixpath
import re
from typing import Optional
from urllib.parse import urljoin

_REPEATED_SLASHES = re.compile(r"/{2,}")


def resolve_key(target_dir: Optional[str], file_name: Optional[str] = None) -> str:
    """
    Join a target directory and file name into a bucket-relative object key.

    Repeated separators are collapsed and ``.``/``..`` segments resolved
    before a single leading slash is removed, so the result never starts
    with ``/``.

    Args:
        target_dir: Directory portion (e.g. "blog/2024/05")
        file_name: File name, or None to resolve the directory alone

    Returns:
        Object key (e.g. "blog/2024/05/photo.jpg")
    """
    joined = "/".join(part for part in (target_dir, file_name) if part)
    if not joined:
        return ""

    key = posixpath.normpath(_REPEATED_SLASHES.sub("/", joined))
    if key in (".", "/"):
        return ""
    if key.startswith("/"):
        key = key[1:]
    return key


def owns_path(asset_url: str, path: str) -> bool:
    """Whether a public path or URL was produced under this asset URL."""
    return path.startswith(asset_url)


def build_asset_url(asset_url: str, key: str) -> str:
    """
    Build the public reference for an object key.

    A root-relative asset URL yields a root-relative path; anything else is
    treated as a base URL and the key is resolved against it.
    """
    clean_key = key[1:] if key.startswith("/") else key
    if asset_url.startswith("/"):
        return f"{asset_url.rstrip('/')}/{clean_key}"
    return urljoin(asset_url, clean_key)


def key_from_path(asset_url: str, path: str) -> str:
    """Recover the object key from a root-relative path built by ``build_asset_url``."""
    key = path[len(asset_url):].rstrip("/")
    if key.startswith("/"):
        key = key[1:]
    return key
