"""
FastAPI application for ReplicaPage.

This module serves image assets under a fixed prefix and returns the site's
index page for every other request.
"""

from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from starlette.background import BackgroundTask
from typing import Optional
import logging
import os

from web.config import Settings, load_settings
from observability.metrics import metrics
from observability.tracing import setup_tracing

logger = logging.getLogger("replicapage.web")


# ------------------------------------------------------------------------------
# Logging
# ------------------------------------------------------------------------------
def configure_logging(level: str):
    """
    Configure log output for the replica.

    Args:
        level: Level name, e.g. "info" or "debug"
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("replicapage").setLevel(level.upper())


# ------------------------------------------------------------------------------
# Handlers
# ------------------------------------------------------------------------------
class ImageFiles(StaticFiles):
    """
    Static file mount that answers every HTTP method.

    Requests other than GET and HEAD are served as GET. A missing base
    directory answers 404 for every path instead of failing.
    """

    async def __call__(self, scope, receive, send):
        if scope.get("method") not in ("GET", "HEAD"):
            scope = {**scope, "method": "GET"}
        await super().__call__(scope, receive, send)

    async def check_config(self):
        if self.directory is not None and not os.path.isdir(self.directory):
            logger.warning("Images directory %s does not exist", self.directory)
            return
        await super().check_config()


class IndexPage:
    """Returns the index page for any method and path it is mounted under."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def __call__(self, scope, receive, send):
        response = FileResponse(
            self.settings.index_path,
            media_type="text/html",
            background=BackgroundTask(
                logger.info, "Request for %s served by python app", self.settings.app_name
            ),
        )
        await response(scope, receive, send)


class RequestMetricsMiddleware:
    """
    Records one metrics sample per HTTP request.

    The duration covers the whole response, body included.
    """

    def __init__(self, app, images_prefix: str):
        self.app = app
        self.images_prefix = images_prefix

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        handler = "images" if scope["path"].startswith(self.images_prefix + "/") else "page"
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            with metrics.request_timer() as timer:
                await self.app(scope, receive, send_wrapper)
        finally:
            metrics.record_request(handler, scope["method"], status_code, timer.duration)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application for one replica.

    Args:
        settings: Replica settings (defaults to the environment)

    Returns:
        FastAPI: Application with the image mount and the page mount
    """
    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="ReplicaPage",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    images_prefix = settings.images_prefix.rstrip("/")

    app.add_middleware(RequestMetricsMiddleware, images_prefix=images_prefix)

    # Mount order matters: the page mount matches every path
    app.mount(
        images_prefix,
        ImageFiles(directory=str(settings.images_path), check_dir=False),
        name="images",
    )
    app.mount("/", IndexPage(settings), name="page")

    setup_tracing(app, settings)
    return app
