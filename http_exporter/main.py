#!/usr/bin/env python3
"""
http-exporter entry point

Loads the YAML config, configures logging, and runs the scrape server with
all configured exporters. SIGINT/SIGTERM stop the server, which stops every
exporter and waits for them to close.
"""

import argparse
import logging
import sys
from pathlib import Path

import uvicorn

from . import __version__
from .config import ConfigError, load_config_from
from .exporters import GaugeRegistry, default_registry
from .log import setup_logging
from .server import create_app

logger = logging.getLogger("http_exporter")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="http-exporter")
    parser.add_argument("-c", "--config", type=Path, default=Path("config.yml"),
                        help="YAML configuration file (default: config.yml)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    logger.info(f"Starting HTTP Exporter version={__version__} config={args.config}")

    try:
        config = load_config_from(args.config)
    except ConfigError as e:
        logger.error(f"Failed to load config: {e}")
        return 1

    setup_logging(config.log)
    logger.info(f"Loaded config:\n{config.summary()}")

    # DuplicateExporterError here is a programming error and aborts startup
    registry = default_registry()
    app = create_app(config, GaugeRegistry(), registry)

    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_config=None,
        access_log=False,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
