"""Gauge registry shared by all exporters.

Exporters that publish the same metric name must share one gauge object,
otherwise prometheus_client refuses the second registration. The registry
hands out one gauge per fully-qualified name for the lifetime of the process.
"""
import logging
import threading
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from prometheus_client import REGISTRY, CollectorRegistry, Gauge

from .errors import MetricLabelsMismatchError

logger = logging.getLogger("http_exporter.metrics")


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """Join non-empty parts with underscores, the way prometheus_client does."""
    return "_".join(part for part in (namespace, subsystem, name) if part)


def set_gauge(gauge: Gauge, labels: Optional[Mapping[str, str]], value: float) -> None:
    """Set a gauge value, going through the labeled child when labels exist."""
    if labels:
        gauge.labels(**labels).set(value)
    else:
        gauge.set(value)


class GaugeRegistry:
    """Get-or-create store of label-parameterized gauges keyed by full name."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else REGISTRY
        self._gauges: Dict[str, Tuple[Gauge, Tuple[str, ...]]] = {}
        self._lock = threading.Lock()

    def get_or_create_gauge(
        self,
        name: str,
        help: str,
        label_names: Iterable[str],
        namespace: str = "",
        subsystem: str = "",
    ) -> Gauge:
        """
        Return the gauge registered under the fully-qualified name, creating it
        on first use.

        The first registration fixes help text and label names. A later call
        with different help text gets the existing gauge; a later call with a
        different set of label names raises MetricLabelsMismatchError.
        """
        fq_name = build_fq_name(namespace, subsystem, name)
        labels = sorted(set(label_names))

        with self._lock:
            entry = self._gauges.get(fq_name)
            if entry is not None:
                gauge, existing = entry
                if list(existing) != labels:
                    raise MetricLabelsMismatchError(fq_name, existing, labels)
                return gauge

            gauge = Gauge(
                name,
                help or name,
                labelnames=labels,
                namespace=namespace,
                subsystem=subsystem,
                registry=self.registry,
            )
            self._gauges[fq_name] = (gauge, tuple(labels))
            logger.debug(f"registered gauge {fq_name} with labels {labels}")
            return gauge

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._gauges)

    def __len__(self) -> int:
        with self._lock:
            return len(self._gauges)
