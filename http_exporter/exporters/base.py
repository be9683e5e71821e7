"""Exporter interface and per-instance configuration."""
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils import format_duration, mask_secrets, parse_duration
from .metrics import GaugeRegistry


class ExporterConfig(BaseModel):
    """One configured exporter instance. Zero interval/timeout inherit the global defaults."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    interval: float = Field(0.0, ge=0)
    timeout: float = Field(0.0, ge=0)
    options: Dict[str, Any] = Field(..., min_length=1)

    @field_validator("interval", "timeout", mode="before")
    @classmethod
    def _parse_duration(cls, value: Union[str, int, float]) -> float:
        return parse_duration(value)

    def summary(self) -> str:
        return (
            f"name={self.name} type={self.type} "
            f"interval={format_duration(self.interval)} timeout={format_duration(self.timeout)} "
            f"options={mask_secrets(self.options)}"
        )


class Exporter(ABC):
    """
    A collector instance driven by one runner task.

    collect() performs one pass and handles its own failures by logging them;
    it never raises for network or parse problems. close() releases held
    resources and may raise, the runner logs the error.
    """

    @abstractmethod
    async def collect(self) -> None:
        """Fetch data once and update gauges"""

    @abstractmethod
    async def close(self) -> None:
        """Release client connections and other resources"""


ExporterFactory = Callable[[ExporterConfig, logging.LoggerAdapter, GaugeRegistry], Exporter]
