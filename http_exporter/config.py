#!/usr/bin/env python3
"""
http-exporter configuration

The config file is YAML:

    global:     default scrape_interval / scrape_timeout for every exporter
    log:        level, format (json|text), add_source
    server:     listen_addr ("[host]:port") and metrics endpoint
    exporters:  list of exporter instances (name, type, interval, timeout, options)

Global durations must be positive. An exporter interval/timeout of 0 (or
omitted) inherits the global value.
"""

import logging
from pathlib import Path
from typing import List, Tuple, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exporters import ExporterConfig
from .utils import format_duration, parse_duration

logger = logging.getLogger("http_exporter.config")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMATS = ("json", "text")


class ConfigError(Exception):
    """Configuration could not be loaded or is invalid"""


class GlobalConfig(BaseModel):
    scrape_interval: float = Field(60.0, gt=0)
    scrape_timeout: float = Field(10.0, gt=0)

    @field_validator("scrape_interval", "scrape_timeout", mode="before")
    @classmethod
    def _parse_duration(cls, value: Union[str, int, float]) -> float:
        return parse_duration(value)


class LogConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"
    add_source: bool = False

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level == "WARN":
            level = "WARNING"
        if level not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        if value not in LOG_FORMATS:
            raise ValueError("format must be json or text")
        return value


class ServerConfig(BaseModel):
    listen_addr: str = Field(":2112", min_length=1)
    endpoint: str = Field("/metrics", min_length=1)

    @field_validator("listen_addr")
    @classmethod
    def _check_listen_addr(cls, value: str) -> str:
        parse_listen_addr(value)
        return value

    @field_validator("endpoint")
    @classmethod
    def _check_endpoint(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("endpoint must start with '/'")
        return value

    @property
    def host(self) -> str:
        return parse_listen_addr(self.listen_addr)[0]

    @property
    def port(self) -> int:
        return parse_listen_addr(self.listen_addr)[1]


class Config(BaseModel):
    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    log: LogConfig = Field(default_factory=LogConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    exporters: List[ExporterConfig] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    def summary(self) -> str:
        """Human readable config dump with exporter passwords masked."""
        lines = [
            f"global: scrape_interval={format_duration(self.global_.scrape_interval)} "
            f"scrape_timeout={format_duration(self.global_.scrape_timeout)}",
            f"log: level={self.log.level} format={self.log.format} add_source={self.log.add_source}",
            f"server: listen_addr={self.server.listen_addr} endpoint={self.server.endpoint}",
            f"exporters: {len(self.exporters)}",
        ]
        lines += [f"  - {exporter.summary()}" for exporter in self.exporters]
        return "\n".join(lines)


def parse_listen_addr(addr: str) -> Tuple[str, int]:
    """Split "[host]:port" into (host, port); an empty host binds all interfaces."""
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ValueError(f"listen_addr must be [host]:port, got {addr!r}")
    try:
        port_num = int(port)
    except ValueError:
        raise ValueError(f"invalid port in listen_addr {addr!r}") from None
    if not 0 < port_num < 65536:
        raise ValueError(f"port out of range in listen_addr {addr!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, port_num


def _format_errors(exc: ValidationError) -> str:
    return "\n".join(
        f"  {'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


def parse_config(data: dict) -> Config:
    """Validate an already loaded config mapping."""
    try:
        return Config.model_validate(data or {})
    except ValidationError as e:
        raise ConfigError(f"invalid config:\n{_format_errors(e)}") from e


def load_config_from(path: Union[str, Path]) -> Config:
    """Load and validate configuration from a YAML file."""
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"failed to open config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to decode config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")

    logger.debug(f"Loaded config from {path}")
    return parse_config(data)
