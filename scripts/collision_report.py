"""Estimate id collisions for a list of conference names."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from loguru import logger

from conference_mapper.evaluation import collision_report
from conference_mapper.mapping import ConfigurationError


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "names",
        type=Path,
        help="Text file with one conference JID per line.",
    )
    parser.add_argument(
        "--id-length",
        type=int,
        default=6,
        help="Number of digits per id (6-12).",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    if not args.names.exists():
        logger.error("Names file not found: {}", args.names)
        return 2
    names = [line.strip() for line in args.names.read_text(encoding="utf-8").splitlines()]
    try:
        report = collision_report(names, args.id_length)
    except ConfigurationError as exc:
        logger.error("{}", exc)
        return 2

    logger.info(
        "names={} unique_ids={} collisions={} (expected {:.2f}) | rate={:.4%} utilization={:.4%}",
        report.names,
        report.unique_ids,
        report.collisions,
        report.expected_collisions,
        report.collision_rate,
        report.utilization,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
