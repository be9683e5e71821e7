"""Logging setup: stdout handler with json or text output."""
import json
import logging
import sys
from typing import Any, Dict, MutableMapping, Tuple

from .config import LogConfig

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
TEXT_FORMAT_SOURCE = "%(asctime)s %(levelname)s %(name)s %(pathname)s:%(lineno)d: %(message)s"

# Record attributes copied into json output when present
EXTRA_FIELDS = ("exporter", "type", "interval", "timeout")


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def __init__(self, add_source: bool = False):
        super().__init__()
        self.add_source = add_source

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if self.add_source:
            entry["source"] = f"{record.pathname}:{record.lineno}"
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ExporterLoggerAdapter(logging.LoggerAdapter):
    """Tags every record with the exporter name and type."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return f"[{self.extra['exporter']}] {msg}", kwargs


def exporter_logger(name: str, type_tag: str, interval: float, timeout: float) -> ExporterLoggerAdapter:
    return ExporterLoggerAdapter(
        logging.getLogger("http_exporter.exporter"),
        {"exporter": name, "type": type_tag, "interval": interval, "timeout": timeout},
    )


def setup_logging(cfg: LogConfig) -> None:
    """Replace root handlers with a single stdout handler configured from cfg."""
    handler = logging.StreamHandler(sys.stdout)
    if cfg.format == "json":
        handler.setFormatter(JsonFormatter(add_source=cfg.add_source))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT_SOURCE if cfg.add_source else TEXT_FORMAT))

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(getattr(logging, cfg.level))
