"""Options decoding for exporters.

Exporter options arrive from the config file as a plain mapping whose shape
only the exporter knows. Decoding happens in two stages:

1. decode: the mapping is dumped back to YAML and loaded again, then
   validated into the exporter's pydantic model. Wrong shapes or primitive
   types raise OptionsDecodeError.
2. validate: the decoded model checks its own semantic rules (required
   address, metric names). Problems raise OptionsValidationError.
"""
from typing import Any, Dict, List, Mapping, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from .errors import OptionsDecodeError, OptionsValidationError

OptionsT = TypeVar("OptionsT", bound="ExporterOptions")


class ExporterOptions(BaseModel):
    """Base class for typed exporter options."""

    def problems(self) -> List[str]:
        """Return semantic problems; an empty list means the options are usable."""
        return []

    def check(self, kind: str) -> None:
        problems = self.problems()
        if problems:
            raise OptionsValidationError(kind, problems)


class MetricConfig(BaseModel):
    name: str = ""
    help: str = ""
    labels: Dict[str, str] = {}

    def problems(self) -> List[str]:
        if not self.name:
            return ["metric config name is required"]
        return []


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def decode_options(raw: Mapping[str, Any], model: Type[OptionsT], kind: str) -> OptionsT:
    """Decode a raw options mapping into ``model`` without semantic checks."""
    try:
        data = yaml.safe_load(yaml.safe_dump(dict(raw or {})))
    except yaml.YAMLError as e:
        raise OptionsDecodeError(kind, f"marshal options: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise OptionsDecodeError(kind, f"expected a mapping, got {type(data).__name__}")

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise OptionsDecodeError(kind, f"unmarshal options: {_format_validation_error(e)}") from e


def parse_options(raw: Mapping[str, Any], model: Type[OptionsT], kind: str) -> OptionsT:
    """Decode and then validate exporter options."""
    opts = decode_options(raw, model, kind)
    opts.check(kind)
    return opts
