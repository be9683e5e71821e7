"""Unit tests for the shared gauge registry

Covers:
- get-or-create identity by fully-qualified name
- label-name conflicts
- concurrent registration
- setting labeled and unlabeled gauges
"""
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from http_exporter.exporters import GaugeRegistry, MetricLabelsMismatchError, set_gauge
from http_exporter.exporters.metrics import build_fq_name


class TestGetOrCreateGauge:
    """Test gauge deduplication"""

    def test_same_name_returns_same_gauge(self, gauges):
        first = gauges.get_or_create_gauge("room_temp", "Room temperature", ["room"])
        second = gauges.get_or_create_gauge("room_temp", "Room temperature", ["room"])
        assert first is second

    def test_identity_survives_other_registrations(self, gauges):
        first = gauges.get_or_create_gauge("room_temp", "", ["room"])
        gauges.get_or_create_gauge("humidity", "", [])
        gauges.get_or_create_gauge("pressure", "", ["station"])
        assert gauges.get_or_create_gauge("room_temp", "", ["room"]) is first
        assert len(gauges) == 3

    def test_first_help_text_wins(self, gauges, prom_registry):
        first = gauges.get_or_create_gauge("room_temp", "first help", [])
        second = gauges.get_or_create_gauge("room_temp", "other help", [])
        assert first is second
        metric = next(m for m in prom_registry.collect() if m.name == "room_temp")
        assert metric.documentation == "first help"

    def test_label_order_does_not_matter(self, gauges):
        first = gauges.get_or_create_gauge("temp", "", ["room", "floor"])
        second = gauges.get_or_create_gauge("temp", "", ["floor", "room"])
        assert first is second

    def test_different_label_set_is_rejected(self, gauges):
        gauges.get_or_create_gauge("temp", "", ["room"])
        with pytest.raises(MetricLabelsMismatchError) as exc_info:
            gauges.get_or_create_gauge("temp", "", ["sensor"])
        assert exc_info.value.name == "temp"
        assert exc_info.value.existing == ["room"]
        assert exc_info.value.requested == ["sensor"]

    def test_namespace_and_subsystem_build_full_name(self, gauges):
        a = gauges.get_or_create_gauge("temp", "", [], namespace="home", subsystem="boiler")
        b = gauges.get_or_create_gauge("boiler_temp", "", [], namespace="home")
        assert a is b
        assert gauges.names() == ["home_boiler_temp"]

    def test_build_fq_name_skips_empty_parts(self):
        assert build_fq_name("", "", "temp") == "temp"
        assert build_fq_name("home", "", "temp") == "home_temp"
        assert build_fq_name("", "boiler", "temp") == "boiler_temp"

    def test_concurrent_callers_share_one_gauge(self, gauges):
        barrier = threading.Barrier(8)

        def register(_):
            barrier.wait()
            return gauges.get_or_create_gauge("shared_temp", "", ["room"])

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(register, range(8)))

        assert all(g is results[0] for g in results)
        assert gauges.names() == ["shared_temp"]

    def test_defaults_to_global_prometheus_registry(self):
        from prometheus_client import REGISTRY
        assert GaugeRegistry().registry is REGISTRY


class TestSetGauge:
    """Test value updates through set_gauge"""

    def test_set_labeled_gauge(self, gauges, prom_registry):
        gauge = gauges.get_or_create_gauge("room_temp", "", ["room"])
        set_gauge(gauge, {"room": "kitchen"}, 21.5)
        set_gauge(gauge, {"room": "office"}, 19.0)
        assert prom_registry.get_sample_value("room_temp", {"room": "kitchen"}) == 21.5
        assert prom_registry.get_sample_value("room_temp", {"room": "office"}) == 19.0

    def test_set_unlabeled_gauge(self, gauges, prom_registry):
        gauge = gauges.get_or_create_gauge("pressure", "", [])
        set_gauge(gauge, {}, 1013.2)
        assert prom_registry.get_sample_value("pressure") == 1013.2

    def test_value_overwritten_by_last_set(self, gauges, prom_registry):
        gauge = gauges.get_or_create_gauge("pressure", "", [])
        set_gauge(gauge, None, 1.0)
        set_gauge(gauge, None, 2.0)
        assert prom_registry.get_sample_value("pressure") == 2.0
