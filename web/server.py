"""
HTTP listener for ReplicaPage.

Runs the application under uvicorn on the configured port. A port that
cannot be bound ends the process with exit status 1.
"""

import logging
from typing import Optional

import uvicorn

from web.config import Settings, load_settings
from web.main import create_app
from observability.metrics import metrics

logger = logging.getLogger("replicapage.server")


class ReplicaServer(uvicorn.Server):
    """uvicorn server that announces the replica once its socket is bound."""

    def __init__(self, config: uvicorn.Config, settings: Settings):
        super().__init__(config)
        self.settings = settings

    async def startup(self, sockets=None):
        # uvicorn exits the process with status 1 here if binding fails
        await super().startup(sockets=sockets)
        if self.started:
            logger.info("%s is listening on port %d", self.settings.app_name, self.settings.port)


def serve(settings: Optional[Settings] = None):
    """
    Start serving and block until shutdown.

    Args:
        settings: Replica settings (defaults to the environment)

    Raises:
        SystemExit: With status 1 when the port cannot be bound
    """
    if settings is None:
        settings = load_settings()

    if settings.metrics_port:
        metrics.start_exporter(settings.metrics_port)

    config = uvicorn.Config(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    ReplicaServer(config, settings).run()


def main():
    serve()


if __name__ == "__main__":
    main()
