"""Abstract storage adapter interface expected by the host."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from fastapi import Request, Response

RequestHandler = Callable[[Request], Response]


@dataclass(frozen=True)
class Image:
    """An uploaded image waiting to be persisted."""

    path: str
    name: str
    type: str = ""


class StorageAdapter(ABC):
    """Abstract interface for image storage operations."""

    @abstractmethod
    def exists(self, file_name: str, target_dir: Optional[str] = None) -> bool:
        """
        Check if a file exists in storage.

        Args:
            file_name: File name (e.g., "photo.jpg")
            target_dir: Directory the file lives in; defaults to the
                current year/month directory

        Returns:
            True if the file exists, False otherwise (including on errors)
        """
        pass

    @abstractmethod
    def save(self, image: Image, target_dir: Optional[str] = None) -> str:
        """
        Persist an image under a collision-free name.

        Args:
            image: Uploaded image descriptor
            target_dir: Directory to store under; defaults to the current
                year/month directory

        Returns:
            Public URL or root-relative path of the stored image

        Raises:
            UploadError: If the image could not be stored
        """
        pass

    @abstractmethod
    def serve(self) -> RequestHandler:
        """
        Build a request handler that streams stored images to clients.

        Returns:
            Callable taking a request and returning a response; failures
            become 404 responses
        """
        pass

    @abstractmethod
    def delete(self, file_name: str, target_dir: Optional[str] = None) -> bool:
        """
        Delete a file from storage.

        Args:
            file_name: File name
            target_dir: Directory the file lives in

        Returns:
            True if the deletion completed, False otherwise
        """
        pass

    @abstractmethod
    def read(self, options: Optional[Mapping[str, str]] = None) -> bytes:
        """
        Read a stored file back by its public path.

        Args:
            options: Mapping with a "path" entry (e.g.,
                {"path": "/content/images/2024/05/photo.jpg"})

        Returns:
            File contents as bytes

        Raises:
            InvalidPathError: If the path is not served by this adapter
            RetrievalError: If the object could not be fetched
        """
        pass
