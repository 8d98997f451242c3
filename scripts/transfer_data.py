#!/usr/bin/env python3
"""Export the stored document to a file, or import one into it."""

import argparse
import asyncio
import sys
from pathlib import Path

from tinymonth.config import AppConfig
from tinymonth.core.registry import create_store
from tinymonth.core.state import StateManager
from tinymonth.core.transfer import ImportFileError, read_import_file, write_export
from tinymonth.utils.logging_config import setup_logging


async def run(args, config: AppConfig) -> Path:
    manager = StateManager.from_config(config, create_store(config))
    await manager.load()

    if args.command == "export":
        path = write_export(manager, args.directory)
    else:
        path = args.file
        manager.import_data(read_import_file(path))

    await manager.flush()
    return path


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--data-file", help="Document path (json backend)")
    sub = parser.add_subparsers(dest="command", required=True)
    export_parser = sub.add_parser("export", help="write tinymonth-export-<date>.json")
    export_parser.add_argument("directory", nargs="?", default=".", type=Path)
    import_parser = sub.add_parser("import", help="replace stored data with a file")
    import_parser.add_argument("file", type=Path)
    args = parser.parse_args(argv)

    overrides = {"data_file": args.data_file} if args.data_file else {}
    config = AppConfig.from_env(**overrides)
    logger = setup_logging(config.log_level, config.log_dir)

    try:
        path = asyncio.run(run(args, config))
    except ImportFileError as e:
        logger.error("Error importing data: %s", e)
        return 1

    print(f"{args.command.capitalize()}ed {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
