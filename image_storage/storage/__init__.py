"""Storage adapters for host image persistence."""

from image_storage.storage.adapter import Image, StorageAdapter
from image_storage.storage.naming import NamingPolicy
from image_storage.storage.s3_adapter import S3StorageAdapter

__all__ = ["Image", "StorageAdapter", "NamingPolicy", "S3StorageAdapter"]
