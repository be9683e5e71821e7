"""
Scrape server.

Serves the Prometheus exposition of the gauge registry on the configured
endpoint and the build version on /version. The exporter supervisor lives
in the app lifespan, so uvicorn's shutdown also stops every exporter.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from . import __version__
from .config import Config
from .exporters import ExporterRegistry, GaugeRegistry, default_registry
from .runner import ExporterSupervisor

logger = logging.getLogger("http_exporter.server")


def create_app(
    config: Config,
    metrics: GaugeRegistry,
    registry: Optional[ExporterRegistry] = None,
) -> FastAPI:
    """Create the FastAPI app serving metrics for the given gauge registry."""
    registry = registry or default_registry()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        supervisor = ExporterSupervisor(config.exporters, config.global_, registry, metrics)
        app.state.supervisor = supervisor
        supervisor.start()
        logger.info(
            f"Started HTTP Exporter on {config.server.listen_addr}{config.server.endpoint} "
            f"with {len(supervisor.runners)} exporters"
        )
        try:
            yield
        finally:
            await supervisor.stop()

    app = FastAPI(title="http-exporter", version=__version__, lifespan=lifespan,
                  docs_url=None, redoc_url=None, openapi_url=None)

    def metrics_endpoint() -> Response:
        return Response(content=generate_latest(metrics.registry), media_type=CONTENT_TYPE_LATEST)

    def version_endpoint() -> PlainTextResponse:
        return PlainTextResponse(__version__)

    app.add_api_route(config.server.endpoint, metrics_endpoint, methods=["GET"])
    app.add_api_route("/version", version_endpoint, methods=["GET"])
    return app
