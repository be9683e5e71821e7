"""http-temp: reads a plain-text temperature from an HTTP endpoint."""
import logging
from typing import List, Optional

import httpx

from .base import ExporterConfig
from .http_base import HttpExporter, HttpOptions, metric_problems
from .metrics import GaugeRegistry
from .options import MetricConfig, parse_options

HTTP_TEMP_TYPE = "http-temp"


class HttpTempOptions(HttpOptions):
    metric: MetricConfig = MetricConfig()

    def problems(self) -> List[str]:
        return super().problems() + metric_problems("metric", self.metric)


class HttpTempExporter(HttpExporter):
    """Expects the response body to be a single float, e.g. ``21.5\\n``."""

    kind = HTTP_TEMP_TYPE

    def __init__(
        self,
        config: ExporterConfig,
        opts: HttpTempOptions,
        log: logging.LoggerAdapter,
        metrics: GaugeRegistry,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.gauge = self.gauge_for(metrics, opts.metric)
        super().__init__(config, opts, log, transport)

    def handle_response(self, response: httpx.Response) -> None:
        temp = float(response.text.strip())
        self.update_gauge(self.gauge, self.opts.metric, temp)


def new_http_temp(config: ExporterConfig, log: logging.LoggerAdapter, metrics: GaugeRegistry) -> HttpTempExporter:
    opts = parse_options(config.options, HttpTempOptions, HTTP_TEMP_TYPE)
    return HttpTempExporter(config, opts, log, metrics)
