"""Shared plumbing for exporters that poll a single HTTP endpoint."""
import logging
from typing import List, Optional

import httpx
from prometheus_client import Gauge

from .base import Exporter, ExporterConfig
from .metrics import GaugeRegistry, set_gauge
from .options import ExporterOptions, MetricConfig


class HttpOptions(ExporterOptions):
    """Connection options common to every HTTP exporter"""

    address: str = ""
    insecure: bool = False
    username: str = ""
    password: str = ""

    def problems(self) -> List[str]:
        if not self.address:
            return ["address is required"]
        return []

    @property
    def url(self) -> str:
        scheme = "http" if self.insecure else "https"
        return f"{scheme}://{self.address}"


def metric_problems(field: str, metric: MetricConfig) -> List[str]:
    return [f"{field}: {problem}" for problem in metric.problems()]


class HttpExporter(Exporter):
    """
    Base class for HTTP exporters.

    Subclasses implement handle_response() to turn a successful response into
    gauge updates. Request, transport and status errors are logged here and
    abandon the pass; gauges keep their last value.
    """

    kind = "http"

    def __init__(
        self,
        config: ExporterConfig,
        opts: HttpOptions,
        log: logging.LoggerAdapter,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.opts = opts
        self.logger = log
        auth = None
        if opts.username and opts.password:
            auth = httpx.BasicAuth(opts.username, opts.password)
        self.client = httpx.AsyncClient(
            timeout=config.timeout or None,
            auth=auth,
            transport=transport,
        )

    @staticmethod
    def gauge_for(metrics: GaugeRegistry, metric: MetricConfig) -> Gauge:
        return metrics.get_or_create_gauge(metric.name, metric.help, metric.labels.keys())

    @staticmethod
    def update_gauge(gauge: Gauge, metric: MetricConfig, value: Optional[float]) -> None:
        if value is None:
            return
        set_gauge(gauge, metric.labels, value)

    async def collect(self) -> None:
        self.logger.debug(f"collecting {self.kind} data")

        try:
            response = await self.client.get(self.opts.url)
        except httpx.HTTPError as e:
            self.logger.error(f"failed to do request: {e!r}")
            return

        if response.status_code != httpx.codes.OK:
            self.logger.error(f"unexpected status code: {response.status_code}")
            return

        try:
            self.handle_response(response)
        except ValueError as e:
            self.logger.error(f"failed to parse response: {e}")

    def handle_response(self, response: httpx.Response) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        self.logger.debug(f"closing {self.kind} exporter")
        await self.client.aclose()
