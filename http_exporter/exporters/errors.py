"""Exceptions raised by the exporter framework."""
from typing import Iterable, List


class ExporterError(Exception):
    """Base class for exporter framework errors"""


class ExporterNotFoundError(ExporterError):
    """No factory is registered for the requested exporter type."""

    def __init__(self, type_tag: str):
        super().__init__(f"exporter type not found: {type_tag!r}")
        self.type_tag = type_tag


class DuplicateExporterError(ExporterError):
    """A factory is already registered under this exporter type."""

    def __init__(self, type_tag: str):
        super().__init__(f"exporter type already registered: {type_tag!r}")
        self.type_tag = type_tag


class OptionsError(ExporterError):
    """Exporter options could not be turned into a usable options object."""

    stage = "options"

    def __init__(self, kind: str, message: str):
        super().__init__(f"{kind} options: {message}")
        self.kind = kind


class OptionsDecodeError(OptionsError):
    """Raw options do not fit the shape of the typed options model."""

    stage = "decode"


class OptionsValidationError(OptionsError):
    """Decoded options are structurally fine but semantically invalid."""

    stage = "validate"

    def __init__(self, kind: str, problems: Iterable[str]):
        self.problems: List[str] = list(problems)
        super().__init__(kind, "; ".join(self.problems))


class MetricLabelsMismatchError(ExporterError):
    """A gauge name was requested again with a different set of label names."""

    def __init__(self, name: str, existing: Iterable[str], requested: Iterable[str]):
        self.name = name
        self.existing = sorted(existing)
        self.requested = sorted(requested)
        super().__init__(
            f"gauge {name!r} already registered with labels {self.existing}, "
            f"requested with {self.requested}"
        )
