from datetime import datetime, timezone

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from image_storage.config import AdapterConfig
from image_storage.storage import NamingPolicy, S3StorageAdapter


def make_client_error(code: str, operation: str = "GetObject", status: int = 400) -> ClientError:
    return ClientError(
        {"Error": {"Code": code, "Message": code}, "ResponseMetadata": {"HTTPStatusCode": status}},
        operation,
    )


class FakeBody:
    def __init__(self, content: bytes = b"", error: Exception | None = None):
        self.content = content
        self.error = error
        self.closed = False

    def read(self) -> bytes:
        if self.error is not None:
            raise self.error
        return self.content

    def close(self) -> None:
        self.closed = True


class FakeS3Client:
    """In-memory stand-in for a boto3 S3 client."""

    def __init__(self):
        self.objects: dict[str, dict] = {}
        self.calls: list[tuple[str, dict]] = []
        self.errors: dict[str, Exception] = {}
        self.body_errors: dict[str, Exception] = {}
        self.bodies: list[FakeBody] = []

    def _record(self, operation: str, **kwargs) -> None:
        self.calls.append((operation, kwargs))
        if operation in self.errors:
            raise self.errors[operation]

    def head_object(self, Bucket, Key):
        self._record("head_object", Bucket=Bucket, Key=Key)
        if Key not in self.objects:
            raise make_client_error("404", "HeadObject", 404)
        return {"ResponseMetadata": {"HTTPStatusCode": 200}, "ContentLength": len(self.objects[Key]["Body"])}

    def put_object(self, Bucket, Key, Body, ContentType, CacheControl, ACL):
        self._record(
            "put_object",
            Bucket=Bucket,
            Key=Key,
            Body=Body,
            ContentType=ContentType,
            CacheControl=CacheControl,
            ACL=ACL,
        )
        self.objects[Key] = {"Body": Body, "ContentType": ContentType, "CacheControl": CacheControl}
        return {"ResponseMetadata": {"HTTPStatusCode": 200}, "ETag": '"etag"'}

    def get_object(self, Bucket, Key):
        self._record("get_object", Bucket=Bucket, Key=Key)
        if Key not in self.objects:
            raise make_client_error("NoSuchKey", "GetObject", 404)
        stored = self.objects[Key]
        body = FakeBody(stored["Body"], self.body_errors.get(Key))
        self.bodies.append(body)
        return {
            "ResponseMetadata": {"HTTPStatusCode": 200},
            "Body": body,
            "CacheControl": stored["CacheControl"],
            "ContentLength": len(stored["Body"]),
            "ContentType": stored["ContentType"],
            "ETag": '"etag"',
            "LastModified": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        }

    def delete_object(self, Bucket, Key):
        self._record("delete_object", Bucket=Bucket, Key=Key)
        self.objects.pop(Key, None)
        return {"ResponseMetadata": {"HTTPStatusCode": 204}}

    def operations(self) -> list[str]:
        return [operation for operation, _ in self.calls]


class FixedNamingPolicy(NamingPolicy):
    def get_target_dir(self, base_dir=None, now=None):
        return super().get_target_dir(base_dir, now or datetime(2024, 5, 17, tzinfo=timezone.utc))


@pytest.fixture
def s3_client():
    return FakeS3Client()


@pytest.fixture
def base_options():
    return {
        "access_key_id": "a",
        "secret_access_key": "b",
        "region": "us-east-1",
        "bucket": "imgs",
        "log_format": "text",
    }


@pytest.fixture
def make_adapter(s3_client, base_options):
    def _make(**overrides) -> S3StorageAdapter:
        config = AdapterConfig(**{**base_options, **overrides})
        return S3StorageAdapter(config, naming=FixedNamingPolicy(), client_factory=lambda _config: s3_client)

    return _make


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "upload.tmp"
    path.write_bytes(b"\x89PNG fake image")
    return path


@pytest.fixture
def connection_error():
    return EndpointConnectionError(endpoint_url="https://s3.us-east-1.amazonaws.com")


@pytest.fixture
def client_error():
    return make_client_error
