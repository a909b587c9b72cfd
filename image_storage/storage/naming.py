"""Target directory and collision-free file naming supplied by the host."""

from __future__ import annotations

import posixpath
import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from image_storage.storage.adapter import Image, StorageAdapter

_UNSAFE_CHARACTERS = re.compile(r"[^\w@.]", re.ASCII)


class NamingPolicy:
    """Default host helpers: year/month directories and counter-suffixed names."""

    def get_target_dir(self, base_dir: Optional[str] = None, now: Optional[datetime] = None) -> str:
        moment = now or datetime.now(timezone.utc)
        year = moment.strftime("%Y")
        month = moment.strftime("%m")
        if base_dir:
            return posixpath.join(base_dir, year, month)
        return posixpath.join(year, month)

    def get_sanitized_file_name(self, file_name: str) -> str:
        return _UNSAFE_CHARACTERS.sub("-", file_name)

    def get_unique_file_name(self, storage: "StorageAdapter", image: "Image", target_dir: str) -> str:
        """
        Find a name under ``target_dir`` that is not taken yet.

        Tries ``name.ext``, then ``name-1.ext``, ``name-2.ext`` and so on,
        asking ``storage.exists`` for each candidate.

        Returns:
            Path of the free name joined onto ``target_dir``
        """
        stem, ext = posixpath.splitext(posixpath.basename(image.name))
        name = self.get_sanitized_file_name(stem)

        attempt = 0
        while True:
            suffix = f"-{attempt}" if attempt else ""
            candidate = f"{name}{suffix}{ext}"
            if not storage.exists(candidate, target_dir):
                return posixpath.join(target_dir, candidate)
            attempt += 1
