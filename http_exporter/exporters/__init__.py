"""
Exporters package - pluggable collectors that publish Prometheus gauges

Structure:
    exporters/
    - base.py            # Exporter interface, ExporterConfig
    - registry.py        # type tag -> factory table
    - options.py         # options decoding and validation
    - metrics.py         # shared gauge registry
    - errors.py          # framework exceptions
    - http_base.py       # common HTTP polling logic
    - http_temp.py       # plain-text temperature
    - http_json_temp.py  # JSON temperature pair
    - http_weather.py    # JSON weather station
"""

from .base import Exporter, ExporterConfig, ExporterFactory
from .errors import (
    DuplicateExporterError,
    ExporterError,
    ExporterNotFoundError,
    MetricLabelsMismatchError,
    OptionsDecodeError,
    OptionsError,
    OptionsValidationError,
)
from .http_json_temp import HTTP_JSON_TEMP_TYPE, HttpJsonTempExporter, new_http_json_temp
from .http_temp import HTTP_TEMP_TYPE, HttpTempExporter, new_http_temp
from .http_weather import HTTP_WEATHER_TYPE, HttpWeatherExporter, new_http_weather
from .metrics import GaugeRegistry, set_gauge
from .options import ExporterOptions, MetricConfig, decode_options, parse_options
from .registry import ExporterRegistry

# Built-in exporter types
BUILTIN_EXPORTERS = {
    HTTP_TEMP_TYPE: new_http_temp,
    HTTP_JSON_TEMP_TYPE: new_http_json_temp,
    HTTP_WEATHER_TYPE: new_http_weather,
}


def default_registry() -> ExporterRegistry:
    """Create a registry with all built-in exporter types registered."""
    registry = ExporterRegistry()
    for type_tag, factory in BUILTIN_EXPORTERS.items():
        registry.register(type_tag, factory)
    return registry


__all__ = [
    # Interface
    'Exporter',
    'ExporterConfig',
    'ExporterFactory',

    # Registries
    'ExporterRegistry',
    'GaugeRegistry',
    'default_registry',
    'set_gauge',

    # Options
    'ExporterOptions',
    'MetricConfig',
    'decode_options',
    'parse_options',

    # Errors
    'ExporterError',
    'ExporterNotFoundError',
    'DuplicateExporterError',
    'OptionsError',
    'OptionsDecodeError',
    'OptionsValidationError',
    'MetricLabelsMismatchError',

    # Built-in exporters
    'HttpTempExporter',
    'HttpJsonTempExporter',
    'HttpWeatherExporter',
    'HTTP_TEMP_TYPE',
    'HTTP_JSON_TEMP_TYPE',
    'HTTP_WEATHER_TYPE',
]
