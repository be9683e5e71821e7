"""Exporter type registry: maps a config ``type`` to a factory."""
import logging
import threading
from typing import Dict, List

from .base import Exporter, ExporterConfig, ExporterFactory
from .errors import DuplicateExporterError, ExporterNotFoundError
from .metrics import GaugeRegistry

logger = logging.getLogger("http_exporter.registry")


class ExporterRegistry:
    """Append-only table of exporter factories keyed by type tag."""

    def __init__(self):
        self._factories: Dict[str, ExporterFactory] = {}
        self._lock = threading.Lock()

    def register(self, type_tag: str, factory: ExporterFactory) -> None:
        """
        Register a factory for ``type_tag``.

        Raises:
            DuplicateExporterError: if the type is already registered. This is
                a programming error and should abort startup.
        """
        with self._lock:
            if type_tag in self._factories:
                raise DuplicateExporterError(type_tag)
            self._factories[type_tag] = factory
        logger.debug(f"registered exporter type {type_tag}")

    def create(self, config: ExporterConfig, log: logging.LoggerAdapter, metrics: GaugeRegistry) -> Exporter:
        """
        Build an exporter for ``config.type``.

        Raises:
            ExporterNotFoundError: if no factory is registered for the type.
            Any exception raised by the factory is propagated unchanged.
        """
        with self._lock:
            factory = self._factories.get(config.type)
        if factory is None:
            raise ExporterNotFoundError(config.type)
        return factory(config, log, metrics)

    def types(self) -> List[str]:
        with self._lock:
            return sorted(self._factories)

    def __contains__(self, type_tag: str) -> bool:
        with self._lock:
            return type_tag in self._factories
