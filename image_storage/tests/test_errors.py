from botocore.exceptions import EndpointConnectionError

from image_storage.core.errors import (
    ConfigurationError,
    InvalidPathError,
    RetrievalError,
    StorageError,
    UploadError,
    classify_error,
)


def test_error_types():
    assert StorageError.error_type == "UNKNOWN"
    assert ConfigurationError.error_type == "CONFIGURATION"
    assert UploadError.error_type == "UPLOAD"
    assert InvalidPathError.error_type == "INVALID_PATH"
    assert RetrievalError.error_type == "RETRIEVAL"


def test_errors_carry_context():
    assert ConfigurationError("bucket").field == "bucket"
    assert UploadError("2024/05/photo.jpg").key == "2024/05/photo.jpg"
    assert InvalidPathError("/other/path.jpg").path == "/other/path.jpg"
    assert "/other/path.jpg" in str(InvalidPathError("/other/path.jpg"))
    assert RetrievalError("2024/05/photo.jpg").key == "2024/05/photo.jpg"


def test_classify_error_custom():
    assert classify_error(UploadError("k")) == "UPLOAD"
    assert classify_error(RetrievalError("k")) == "RETRIEVAL"


def test_classify_client_errors(client_error):
    assert classify_error(client_error("404")) == "NOT_FOUND"
    assert classify_error(client_error("NoSuchKey")) == "NOT_FOUND"
    assert classify_error(client_error("AccessDenied")) == "PERMISSION"
    assert classify_error(client_error("InvalidAccessKeyId")) == "PERMISSION"
    assert classify_error(client_error("SlowDown")) == "BACKEND"


def test_classify_network_errors():
    error = EndpointConnectionError(endpoint_url="http://localhost:9000")
    assert classify_error(error) == "NETWORK"


def test_classify_error_messages():
    assert classify_error(RuntimeError("file not found")) == "NOT_FOUND"
    assert classify_error(RuntimeError("permission denied")) == "PERMISSION"
    assert classify_error(RuntimeError("connection reset")) == "NETWORK"
    assert classify_error(RuntimeError("unknown")) == "UNKNOWN"
