"""Run the conference mapper HTTP API."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

import uvicorn
from loguru import logger

from conference_mapper.api import create_app
from conference_mapper.mapping import ConfigurationError
from conference_mapper.settings import load_settings
from conference_mapper.utils import configure_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional YAML configuration file (see configs/default.yaml).",
    )
    parser.add_argument("-d", "--database", help="Conference mapper database path.")
    parser.add_argument("--host", help="Interface to bind.")
    parser.add_argument("-p", "--port", type=int, help="API listen port.")
    parser.add_argument("-l", "--phone-list", help="JSON dial-in phone number list.")
    parser.add_argument(
        "-i",
        "--id-length",
        type=int,
        help="Number of digits to use for conference ids (6-12).",
    )
    parser.add_argument("--log-level", help="Loguru level name (INFO, DEBUG, ...).")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings(
            args.config,
            cli_overrides={
                "store.database": args.database,
                "server.host": args.host,
                "server.port": args.port,
                "phone_list": args.phone_list,
                "mapping.id_length": args.id_length,
                "logging.level": args.log_level,
            },
        )
        configure_logging(settings.log_level)
        app = create_app(settings)
    except (ConfigurationError, FileNotFoundError) as exc:
        logger.error("Refusing to start: {}", exc)
        return 2

    logger.info("Listening on {}:{} with store {}", settings.host, settings.port, settings.database)
    uvicorn.run(app, host=settings.host, port=settings.port, access_log=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
