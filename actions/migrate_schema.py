#!/usr/bin/env python3
"""
Create the widget tables in the configured database.

**Usage**:
    python actions/migrate_schema.py
    python actions/migrate_schema.py --config config/ --drop-first

Reads the same configuration as run_server.py. With --drop-first every table
known to widget_service.db.tables is dropped before being recreated, which
wipes all data; intended for local development databases only.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

# Add project root to Python path so we can import widget_service when run as a script
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from actions.run_server import load_config
from widget_service.config.settings import ConfigParseError
from widget_service.db.engine import build_engine
from widget_service.db.tables import metadata
from widget_service.utils.logs import configure_logging

logger = logging.getLogger("migrate_schema")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the widget tables")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Directory of .env/.properties files to read (environment variables win)",
    )
    parser.add_argument(
        "--drop-first",
        action="store_true",
        help="Drop existing tables before creating them (destroys data)",
    )
    return parser.parse_args(argv)


def migrate(engine, drop_first: bool = False) -> None:
    """Create all tables in metadata on engine, optionally dropping them first."""
    if drop_first:
        logger.warning("Dropping tables: %s", ", ".join(metadata.tables))
        metadata.drop_all(engine)
    metadata.create_all(engine)
    logger.info("Schema up to date: %s", ", ".join(metadata.tables))


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging()

    try:
        config = load_config(args.config)
    except (ConfigParseError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    engine = build_engine(config)
    try:
        migrate(engine, drop_first=args.drop_first)
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
