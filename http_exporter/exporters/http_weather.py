"""http-weather: reads a weather station JSON document.

Response shape::

    {"temperature0": 21.4, "temperature1": 19.8, "temperature2": 4.1,
     "humidity": 55.0, "pressure": 1013.2}
"""
import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, ConfigDict

from .base import ExporterConfig
from .http_base import HttpExporter, HttpOptions, metric_problems
from .metrics import GaugeRegistry
from .options import MetricConfig, parse_options

HTTP_WEATHER_TYPE = "http-weather"

WEATHER_FIELDS = ("temperature0", "temperature1", "temperature2", "humidity", "pressure")


class WeatherMetrics(BaseModel):
    temperature0: MetricConfig = MetricConfig()
    temperature1: MetricConfig = MetricConfig()
    temperature2: MetricConfig = MetricConfig()
    humidity: MetricConfig = MetricConfig()
    pressure: MetricConfig = MetricConfig()


class HttpWeatherOptions(HttpOptions):
    metrics: WeatherMetrics = WeatherMetrics()

    def problems(self) -> List[str]:
        problems = super().problems()
        for field in WEATHER_FIELDS:
            problems += metric_problems(field, getattr(self.metrics, field))
        return problems


class WeatherData(BaseModel):
    model_config = ConfigDict(strict=True)

    temperature0: Optional[float] = 0.0
    temperature1: Optional[float] = 0.0
    temperature2: Optional[float] = 0.0
    humidity: Optional[float] = 0.0
    pressure: Optional[float] = 0.0


class HttpWeatherExporter(HttpExporter):
    kind = HTTP_WEATHER_TYPE

    def __init__(
        self,
        config: ExporterConfig,
        opts: HttpWeatherOptions,
        log: logging.LoggerAdapter,
        metrics: GaugeRegistry,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.gauges = {
            field: self.gauge_for(metrics, getattr(opts.metrics, field))
            for field in WEATHER_FIELDS
        }
        super().__init__(config, opts, log, transport)

    def handle_response(self, response: httpx.Response) -> None:
        data = WeatherData.model_validate(response.json())
        for field in WEATHER_FIELDS:
            self.update_gauge(self.gauges[field], getattr(self.opts.metrics, field), getattr(data, field))


def new_http_weather(config: ExporterConfig, log: logging.LoggerAdapter, metrics: GaugeRegistry) -> HttpWeatherExporter:
    opts = parse_options(config.options, HttpWeatherOptions, HTTP_WEATHER_TYPE)
    return HttpWeatherExporter(config, opts, log, metrics)
