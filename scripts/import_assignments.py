#!/usr/bin/env python3
"""Merge a ``date,calendars`` CSV file into the stored document."""

import argparse
import asyncio
import sys
from pathlib import Path

from tinymonth.config import AppConfig
from tinymonth.core.csv_import import CsvFormatError, import_csv
from tinymonth.core.registry import create_store
from tinymonth.core.store import StoreError
from tinymonth.utils.logging_config import setup_logging


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("csv_file", type=Path, help="CSV with a date,calendars header")
    parser.add_argument("--data-file", help="Document path (json backend)")
    parser.add_argument("--color", help="Color for calendars created by the import")
    args = parser.parse_args(argv)

    overrides = {}
    if args.data_file:
        overrides["data_file"] = args.data_file
    config = AppConfig.from_env(**overrides)
    logger = setup_logging(config.log_level, config.log_dir)

    try:
        text = args.csv_file.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("CSV not found: %s (%s)", args.csv_file, e)
        return 1

    store = create_store(config)
    try:
        summary = asyncio.run(import_csv(store, text, args.color or config.default_color))
    except (CsvFormatError, StoreError) as e:
        logger.error("%s", e)
        return 1

    print(f"Imported {summary.rows} rows")
    print(f"Total assigned dates: {summary.dates}")
    if summary.created_calendars:
        print(f"Created calendars: {', '.join(summary.created_calendars)}")
    print(f"Active calendar: {summary.active_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
