"""Dump every stored conference mapping to CSV."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from loguru import logger

from conference_mapper.evaluation import export_mappings
from conference_mapper.mapping import SQLiteMappingStore, StoreError


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--database",
        type=Path,
        default=Path("mapper.db"),
        help="Conference mapper database path.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("mappings.csv"),
        help="Destination CSV file.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    if not args.database.exists():
        logger.error("Database {} does not exist", args.database)
        return 2
    try:
        with SQLiteMappingStore(args.database) as store:
            export_mappings(store, args.output)
    except StoreError as exc:
        logger.error("Export failed: {}", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
