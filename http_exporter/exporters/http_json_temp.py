"""http-json-temp: reads two temperatures from a JSON endpoint."""
import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, ConfigDict

from .base import ExporterConfig
from .http_base import HttpExporter, HttpOptions, metric_problems
from .metrics import GaugeRegistry
from .options import MetricConfig, parse_options

HTTP_JSON_TEMP_TYPE = "http-json-temp"


class JsonTempMetrics(BaseModel):
    temperature0: MetricConfig = MetricConfig()
    temperature1: MetricConfig = MetricConfig()


class HttpJsonTempOptions(HttpOptions):
    metrics: JsonTempMetrics = JsonTempMetrics()

    def problems(self) -> List[str]:
        return (
            super().problems()
            + metric_problems("temperature0", self.metrics.temperature0)
            + metric_problems("temperature1", self.metrics.temperature1)
        )


class JsonTempData(BaseModel):
    """Sensor payload. Missing fields read as 0, null fields leave the gauge untouched."""

    model_config = ConfigDict(strict=True)

    temperature0: Optional[float] = 0.0
    temperature1: Optional[float] = 0.0


class HttpJsonTempExporter(HttpExporter):
    kind = HTTP_JSON_TEMP_TYPE

    def __init__(
        self,
        config: ExporterConfig,
        opts: HttpJsonTempOptions,
        log: logging.LoggerAdapter,
        metrics: GaugeRegistry,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.temperature0 = self.gauge_for(metrics, opts.metrics.temperature0)
        self.temperature1 = self.gauge_for(metrics, opts.metrics.temperature1)
        super().__init__(config, opts, log, transport)

    def handle_response(self, response: httpx.Response) -> None:
        data = JsonTempData.model_validate(response.json())
        self.update_gauge(self.temperature0, self.opts.metrics.temperature0, data.temperature0)
        self.update_gauge(self.temperature1, self.opts.metrics.temperature1, data.temperature1)


def new_http_json_temp(config: ExporterConfig, log: logging.LoggerAdapter, metrics: GaugeRegistry) -> HttpJsonTempExporter:
    opts = parse_options(config.options, HttpJsonTempOptions, HTTP_JSON_TEMP_TYPE)
    return HttpJsonTempExporter(config, opts, log, metrics)
