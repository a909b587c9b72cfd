"""S3-compatible storage adapter for host images."""

from __future__ import annotations

from datetime import datetime
from email.utils import format_datetime
from typing import Any, Callable, Mapping, Optional

import boto3
from botocore.config import Config as BotoConfig
from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

from image_storage.config import AdapterConfig
from image_storage.core.errors import InvalidPathError, RetrievalError, UploadError, classify_error
from image_storage.core.logging import log_context, setup_logger
from image_storage.core.outcome import Outcome, attempt
from image_storage.storage.adapter import Image, RequestHandler, StorageAdapter
from image_storage.storage.keys import build_asset_url, key_from_path, owns_path, resolve_key
from image_storage.storage.naming import NamingPolicy
from image_storage.utils.filesystem import get_content_type, safe_read_file

CACHE_CONTROL = f"max-age={30 * 24 * 60 * 60}"

# Response metadata forwarded by serve(), as (boto3 field, HTTP header).
FORWARDED_HEADERS = (
    ("CacheControl", "Cache-Control"),
    ("ContentLength", "Content-Length"),
    ("ContentType", "Content-Type"),
    ("ETag", "ETag"),
    ("LastModified", "Last-Modified"),
)

ClientFactory = Callable[[AdapterConfig], Any]


def create_s3_client(config: AdapterConfig) -> Any:
    """Build a boto3 S3 client on its own session for the configured bucket and endpoint."""
    return boto3.session.Session().client(
        "s3",
        endpoint_url=config.endpoint or None,
        aws_access_key_id=config.access_key_id,
        aws_secret_access_key=config.secret_access_key,
        region_name=config.region,
        config=BotoConfig(
            s3={"addressing_style": config.addressing_style},
            retries={"max_attempts": config.max_attempts, "mode": "standard"},
        ),
    )


def _status_code(response: Mapping[str, Any]) -> Optional[int]:
    return response.get("ResponseMetadata", {}).get("HTTPStatusCode")


def _header_value(value: Any) -> str:
    if isinstance(value, datetime):
        return format_datetime(value, usegmt=True)
    return str(value)


def _drain(body: Any) -> bytes:
    try:
        return body.read()
    finally:
        body.close()


class S3StorageAdapter(StorageAdapter):
    """Storage adapter for S3 and S3-compatible object stores."""

    def __init__(
        self,
        config: AdapterConfig,
        naming: Optional[NamingPolicy] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        """
        Initialize S3 storage adapter.

        No network calls happen here; a client is created for every
        operation through ``client_factory``.

        Args:
            config: Adapter configuration
            naming: Target directory and unique name policy
            client_factory: Callable building an S3 client from the config

        Raises:
            ConfigurationError: If a required setting is missing
        """
        config.validate()
        self.config = config
        self.naming = naming or NamingPolicy()
        self.client_factory = client_factory or create_s3_client
        self.logger = setup_logger("image_storage.s3", config)

    @property
    def s3_client(self) -> Any:
        return self.client_factory(self.config)

    def _default_target_dir(self) -> str:
        return self.naming.get_target_dir(self.config.path_prefix)

    def _object_key(self, file_name: Optional[str], target_dir: Optional[str]) -> str:
        if target_dir is None:
            target_dir = self._default_target_dir()
        return resolve_key(target_dir, file_name)

    def exists(self, file_name: str, target_dir: Optional[str] = None) -> bool:
        """Check if a file exists in the bucket."""
        key = self._object_key(file_name, target_dir)

        def head() -> bool:
            response = self.s3_client.head_object(Bucket=self.config.bucket, Key=key)
            return _status_code(response) == 200

        return attempt(head).report(self.logger, "exists", key)

    def save(self, image: Image, target_dir: Optional[str] = None) -> str:
        """Upload an image under a unique key and return its public URL."""
        base_dir = self._object_key(None, target_dir)
        file_name = self.naming.get_unique_file_name(self, image, base_dir)
        key = resolve_key(file_name)

        with log_context(self.logger, operation="save", bucket=self.config.bucket, key=key) as log:
            body = safe_read_file(image.path, key)
            try:
                self.s3_client.put_object(
                    Bucket=self.config.bucket,
                    Key=key,
                    Body=body,
                    ContentType=image.type or get_content_type(image.name),
                    CacheControl=CACHE_CONTROL,
                    ACL=self.config.acl,
                )
            except Exception as exc:
                log.error(f"Upload failed for {key} [{classify_error(exc)}]: {exc}")
                raise UploadError(key) from exc

            log.info(f"Stored {len(body)} bytes at {key}")

        return build_asset_url(self.config.asset_url, key)

    def serve(self) -> RequestHandler:
        """Build a handler that returns stored objects or a plain 404."""

        def handler(request: Request) -> Response:
            path = request.path_params.get("path", request.url.path)
            key = path[1:] if path.startswith("/") else path
            try:
                response = self.s3_client.get_object(Bucket=self.config.bucket, Key=key)
                if _status_code(response) != 200:
                    raise RetrievalError(key, f"Unexpected status for {key}: {_status_code(response)}")
                body = _drain(response["Body"])
            except Exception as exc:  # noqa: BLE001 - every failure is served as a 404
                Outcome.failure(exc).report(self.logger, "serve", key)
                return PlainTextResponse("File not found", status_code=404)

            headers = {
                header: _header_value(response[field])
                for field, header in FORWARDED_HEADERS
                if response.get(field) is not None
            }
            return Response(content=body, status_code=200, headers=headers)

        return handler

    def delete(self, file_name: str, target_dir: Optional[str] = None) -> bool:
        """Delete a file from the bucket; failures are reported as False."""
        key = self._object_key(file_name, target_dir)

        def remove() -> bool:
            self.s3_client.delete_object(Bucket=self.config.bucket, Key=key)
            return True

        return attempt(remove).report(self.logger, "delete", key)

    def read(self, options: Optional[Mapping[str, str]] = None) -> bytes:
        """Read an object back from the public path ``save`` returned."""
        path = (options or {}).get("path") or ""
        if not owns_path(self.config.asset_url, path):
            raise InvalidPathError(path)

        key = key_from_path(self.config.asset_url, path)
        try:
            response = self.s3_client.get_object(Bucket=self.config.bucket, Key=key)
        except Exception as exc:
            raise RetrievalError(key) from exc

        try:
            return _drain(response["Body"])
        except Exception as exc:
            raise RetrievalError(key, f"Failed to read body of {key}") from exc
