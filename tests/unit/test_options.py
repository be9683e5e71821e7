"""Unit tests for exporter options decoding and validation"""
from typing import List
from unittest.mock import patch

import pytest

from http_exporter.exporters import (
    ExporterOptions,
    MetricConfig,
    OptionsDecodeError,
    OptionsError,
    OptionsValidationError,
    decode_options,
    parse_options,
)
from http_exporter.exporters.http_json_temp import HttpJsonTempOptions
from http_exporter.exporters.http_temp import HttpTempOptions
from http_exporter.exporters.http_weather import HttpWeatherOptions

VALID_TEMP_OPTIONS = {
    "address": "sensor.local/temp",
    "insecure": True,
    "username": "admin",
    "password": "secret",
    "metric": {
        "name": "room_temp",
        "help": "Room temperature",
        "labels": {"room": "kitchen"},
    },
}


class TestDecodeOptions:
    """Test the decode stage"""

    def test_decode_valid_options(self):
        opts = decode_options(VALID_TEMP_OPTIONS, HttpTempOptions, "http-temp")
        assert opts.address == "sensor.local/temp"
        assert opts.insecure is True
        assert opts.metric.name == "room_temp"
        assert opts.metric.labels == {"room": "kitchen"}

    def test_wrong_primitive_type_is_decode_error(self):
        with pytest.raises(OptionsDecodeError) as exc_info:
            decode_options({"address": 123}, HttpTempOptions, "http-temp")
        assert "address" in str(exc_info.value)
        assert exc_info.value.stage == "decode"
        assert exc_info.value.kind == "http-temp"

    def test_wrong_nested_shape_is_decode_error(self):
        with pytest.raises(OptionsDecodeError):
            decode_options({"address": "x", "metric": "room_temp"}, HttpTempOptions, "http-temp")

    def test_unserializable_value_is_decode_error(self):
        with pytest.raises(OptionsDecodeError) as exc_info:
            decode_options({"address": object()}, HttpTempOptions, "http-temp")
        assert exc_info.value.__cause__ is not None

    def test_unknown_keys_ignored(self):
        opts = decode_options({"address": "x", "colour": "blue"}, HttpTempOptions, "http-temp")
        assert opts.address == "x"

    def test_defaults_applied(self):
        opts = decode_options({"address": "x"}, HttpTempOptions, "http-temp")
        assert opts.insecure is False
        assert opts.username == ""
        assert opts.metric == MetricConfig()


class TestParseOptions:
    """Test the decode + validate pipeline"""

    def test_decode_failure_skips_validation(self):
        with patch.object(HttpTempOptions, "check") as check:
            with pytest.raises(OptionsDecodeError):
                parse_options({"address": 123}, HttpTempOptions, "http-temp")
        check.assert_not_called()

    def test_missing_address_is_validation_error(self):
        raw = dict(VALID_TEMP_OPTIONS, address="")
        with pytest.raises(OptionsValidationError) as exc_info:
            parse_options(raw, HttpTempOptions, "http-temp")
        assert exc_info.value.problems == ["address is required"]
        assert exc_info.value.stage == "validate"

    def test_all_problems_reported(self):
        with pytest.raises(OptionsValidationError) as exc_info:
            parse_options({"insecure": True}, HttpTempOptions, "http-temp")
        assert exc_info.value.problems == [
            "address is required",
            "metric: metric config name is required",
        ]

    def test_errors_share_base_class(self):
        with pytest.raises(OptionsError):
            parse_options({"address": 123}, HttpTempOptions, "http-temp")
        with pytest.raises(OptionsError):
            parse_options({"address": ""}, HttpTempOptions, "http-temp")

    def test_json_temp_requires_both_metric_names(self):
        raw = {
            "address": "x",
            "metrics": {"temperature0": {"name": "t0"}},
        }
        with pytest.raises(OptionsValidationError) as exc_info:
            parse_options(raw, HttpJsonTempOptions, "http-json-temp")
        assert exc_info.value.problems == ["temperature1: metric config name is required"]

    def test_weather_valid(self):
        raw = {
            "address": "weather.local",
            "metrics": {
                field: {"name": f"weather_{field}"}
                for field in ("temperature0", "temperature1", "temperature2", "humidity", "pressure")
            },
        }
        opts = parse_options(raw, HttpWeatherOptions, "http-weather")
        assert opts.metrics.pressure.name == "weather_pressure"

    def test_custom_options_model(self):
        class PortOptions(ExporterOptions):
            port: int = 0

            def problems(self) -> List[str]:
                return [] if self.port > 0 else ["port must be positive"]

        assert parse_options({"port": 8080}, PortOptions, "custom").port == 8080
        with pytest.raises(OptionsValidationError):
            parse_options({"port": 0}, PortOptions, "custom")
        with pytest.raises(OptionsDecodeError):
            parse_options({"port": "eighty"}, PortOptions, "custom")


class TestHttpOptions:
    """Test derived connection settings"""

    def test_url_uses_https_by_default(self):
        opts = decode_options({"address": "host/path"}, HttpTempOptions, "http-temp")
        assert opts.url == "https://host/path"

    def test_url_insecure_uses_http(self):
        opts = decode_options({"address": "host/path", "insecure": True}, HttpTempOptions, "http-temp")
        assert opts.url == "http://host/path"
