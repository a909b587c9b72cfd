import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv

from image_storage.core.errors import ConfigurationError

DEFAULT_ASSET_URL = "/content/images/"
DEFAULT_ACL = "public-read"

REQUIRED_FIELDS = ("access_key_id", "secret_access_key", "region", "bucket")

# Option names used by the host's plugin configuration.
HOST_OPTION_NAMES = {
    "accessKeyId": "access_key_id",
    "secretAccessKey": "secret_access_key",
    "region": "region",
    "bucket": "bucket",
    "endpoint": "endpoint",
    "pathPrefix": "path_prefix",
    "assetUrl": "asset_url",
    "acl": "acl",
    "forcePathStyle": "force_path_style",
}


def _load_dotenv() -> None:
    env_path = Path(__file__).resolve().parent / ".env"
    load_dotenv(dotenv_path=env_path, override=False)
    load_dotenv(override=False)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class AdapterConfig:
    # Credentials and bucket
    access_key_id: str
    secret_access_key: str
    region: str
    bucket: str

    # Addressing
    endpoint: str | None = None
    force_path_style: bool = False

    # Keys and public URLs
    path_prefix: str = ""
    asset_url: str = DEFAULT_ASSET_URL
    acl: str = DEFAULT_ACL

    # Client retries (handled by botocore)
    max_attempts: int = 3

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_file_path: str | None = None

    def validate(self) -> None:
        for name in REQUIRED_FIELDS:
            if not getattr(self, name):
                raise ConfigurationError(name)

        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts", "MAX_ATTEMPTS must be >= 1")

        if self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ConfigurationError(
                "log_level", "LOG_LEVEL must be DEBUG, INFO, WARNING, ERROR, or CRITICAL"
            )

        if self.log_format not in {"json", "text"}:
            raise ConfigurationError("log_format", "LOG_FORMAT must be 'json' or 'text'")

    @property
    def addressing_style(self) -> str:
        return "path" if self.force_path_style else "auto"

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "AdapterConfig":
        """
        Build a config from the host's plugin options.

        Accepts the host's camelCase option names as well as the field names.
        Options that are absent or None keep their defaults; required fields
        that are absent become empty strings so ``validate`` can name them.
        """
        known = {field.name for field in fields(cls)}
        values: dict[str, Any] = {name: "" for name in REQUIRED_FIELDS}
        for option, value in options.items():
            name = HOST_OPTION_NAMES.get(option, option)
            if name not in known or value is None:
                continue
            values[name] = value

        if "force_path_style" in values:
            values["force_path_style"] = _parse_bool(values["force_path_style"])
        if "max_attempts" in values:
            values["max_attempts"] = int(values["max_attempts"])

        return cls(**values)


def load_config() -> AdapterConfig:
    _load_dotenv()

    config = AdapterConfig(
        access_key_id=os.environ.get("S3_ACCESS_KEY_ID", "").strip(),
        secret_access_key=os.environ.get("S3_SECRET_ACCESS_KEY", "").strip(),
        region=os.environ.get("S3_REGION", "").strip(),
        bucket=os.environ.get("S3_BUCKET", "").strip(),
        endpoint=os.environ.get("S3_ENDPOINT") or None,
        force_path_style=_parse_bool(os.environ.get("S3_FORCE_PATH_STYLE", "false")),
        path_prefix=os.environ.get("S3_PATH_PREFIX", ""),
        asset_url=os.environ.get("S3_ASSET_URL", DEFAULT_ASSET_URL),
        acl=os.environ.get("S3_ACL", DEFAULT_ACL),
        max_attempts=int(os.environ.get("S3_MAX_ATTEMPTS", "3")),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "json"),
        log_file_path=os.environ.get("LOG_FILE_PATH") or None,
    )

    config.validate()
    return config
