#!/usr/bin/env python3
"""
Run the widget HTTP server against PostgreSQL.

**Usage**:
    python actions/run_server.py
    python actions/run_server.py --config config/
    KTOR_DEMO_HTTP_PORT=8080 python actions/run_server.py --log-level DEBUG

**What this script does**:
  1. Configure logging.
  2. Resolve AppConfig from the environment, layered over any files in --config.
  3. Build the SQLAlchemy engine, transaction runner and DAO factory.
  4. Create the FastAPI app and serve it with uvicorn on http_port.

**Configuration** (all optional, defaults in parentheses):
  - KTOR_DEMO_DB_IP (127.0.0.1)
  - KTOR_DEMO_DB_PORT (25432)
  - KTOR_DEMO_DB_USER (local-dev)
  - KTOR_DEMO_DB_PASSWORD (local-dev)
  - KTOR_DEMO_HTTP_PORT (9080)

**Exit codes**:
  - 0: Server stopped normally
  - 1: Configuration error (unparseable value, missing --config directory)
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

import uvicorn

# Add project root to Python path so we can import widget_service when run as a script
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from widget_service.api.app import create_app
from widget_service.config.settings import AppConfig, ConfigParseError, resolve_settings
from widget_service.config.sources import layered_environment
from widget_service.db.engine import build_engine
from widget_service.db.transactions import SqlTransactions
from widget_service.utils.logs import configure_logging
from widget_service.widgets.factory import SqlDaoFactory

logger = logging.getLogger("run_server")

LISTEN_HOST = "0.0.0.0"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Namespace with attributes: config (Path or None), log_level (str)
    """
    parser = argparse.ArgumentParser(description="Run the widget HTTP server")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Directory of .env/.properties files to read (environment variables win)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging level (default: INFO)",
    )
    return parser.parse_args(argv)


def load_config(config_dir: Optional[Path]) -> AppConfig:
    """
    Resolve AppConfig from the environment layered over config_dir.

    Raises:
        ConfigParseError: If a value cannot be parsed as its declared type.
        FileNotFoundError: If config_dir is given but does not exist.
    """
    return resolve_settings(layered_environment(config_dir))


def main(argv: Optional[Sequence[str]] = None) -> None:
    start = time.perf_counter()
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = load_config(args.config)
    except (ConfigParseError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("Configuration: %s", config.redacted())

    transactions = SqlTransactions(build_engine(config))
    app = create_app(transactions, SqlDaoFactory())

    logger.info("Server initialized in %.3f s", time.perf_counter() - start)
    uvicorn.run(app, host=LISTEN_HOST, port=config.http_port, log_config=None)


if __name__ == "__main__":
    main()
