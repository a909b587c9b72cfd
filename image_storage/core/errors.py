from __future__ import annotations

from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
PERMISSION_CODES = {"403", "AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch"}


class StorageError(Exception):
    error_type = "UNKNOWN"


class ConfigurationError(StorageError):
    error_type = "CONFIGURATION"

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"Missing required configuration: {field}")


class UploadError(StorageError):
    error_type = "UPLOAD"

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Failed to upload object: {key}")


class InvalidPathError(StorageError):
    error_type = "INVALID_PATH"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} is not stored in s3")


class RetrievalError(StorageError):
    error_type = "RETRIEVAL"

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Could not read object: {key}")


def client_error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def classify_error(error: Exception) -> str:
    if hasattr(error, "error_type"):
        return getattr(error, "error_type")

    if isinstance(error, ClientError):
        code = client_error_code(error)
        if code in NOT_FOUND_CODES:
            return "NOT_FOUND"
        if code in PERMISSION_CODES:
            return "PERMISSION"
        return "BACKEND"

    if isinstance(error, (EndpointConnectionError, BotoCoreError)):
        return "NETWORK"

    message = str(error).lower()

    if "not found" in message or "no such" in message:
        return "NOT_FOUND"

    if "permission" in message or "denied" in message:
        return "PERMISSION"

    if "connection" in message or "network" in message or "timed out" in message:
        return "NETWORK"

    return "UNKNOWN"
