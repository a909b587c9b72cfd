from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit

from fastapi import FastAPI
from pydantic import BaseModel

from image_storage.config import load_config
from image_storage.storage import S3StorageAdapter


class HealthResponse(BaseModel):
    status: str
    bucket: str
    asset_url: str


def serve_mount_path(asset_url: str) -> str:
    """Route prefix under which stored images are served."""
    path = asset_url if asset_url.startswith("/") else urlsplit(asset_url).path
    return "/" + path.strip("/") + "/" if path.strip("/") else "/"


def create_app(adapter: Optional[S3StorageAdapter] = None) -> FastAPI:
    if adapter is None:
        adapter = S3StorageAdapter(load_config())

    config = adapter.config
    app = FastAPI(title="Image Storage")

    @app.get("/health", response_model=HealthResponse)
    def health_check() -> HealthResponse:
        return HealthResponse(status="ok", bucket=config.bucket, asset_url=config.asset_url)

    app.add_api_route(
        serve_mount_path(config.asset_url) + "{path:path}",
        adapter.serve(),
        methods=["GET"],
        include_in_schema=False,
    )

    return app
