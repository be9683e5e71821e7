"""http-exporter - polls HTTP sensors and republishes them as Prometheus gauges"""

__version__ = "0.1.0"
