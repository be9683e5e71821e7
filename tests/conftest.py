"""Pytest configuration and shared fixtures"""
import os
import sys

import pytest
from prometheus_client import CollectorRegistry

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from http_exporter.config import GlobalConfig
from http_exporter.exporters import ExporterRegistry, GaugeRegistry


@pytest.fixture
def prom_registry():
    """Isolated prometheus registry per test"""
    return CollectorRegistry()


@pytest.fixture
def gauges(prom_registry):
    return GaugeRegistry(prom_registry)


@pytest.fixture
def global_config():
    return GlobalConfig(scrape_interval=60, scrape_timeout=10)


@pytest.fixture
def exporter_registry():
    return ExporterRegistry()
