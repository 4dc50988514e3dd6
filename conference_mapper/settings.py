"""
Runtime settings for the conference mapper service.

Settings are layered as built-in defaults, then the YAML config file, then
``CONFERENCE_MAPPER_*`` environment variables, then command-line flags. The
result is validated once into an immutable :class:`MapperSettings` that is
passed explicitly to the pieces that need it.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .mapping.errors import ConfigurationError
from .mapping.identifiers import validate_digits
from .mapping.resolver import DEFAULT_COLLISION_ATTEMPTS
from .utils.config import apply_overrides, env_overrides, get_by_dotted_path, load_config

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

DEFAULTS: dict[str, Any] = {
    "store": {"database": "mapper.db"},
    "server": {"host": "0.0.0.0", "port": 9000},
    "mapping": {"id_length": 6, "collision_attempts": DEFAULT_COLLISION_ATTEMPTS},
    "phone_list": None,
    "logging": {"level": "INFO"},
}

ENV_VARIABLES: dict[str, str] = {
    "CONFERENCE_MAPPER_DATABASE": "store.database",
    "CONFERENCE_MAPPER_HOST": "server.host",
    "CONFERENCE_MAPPER_PORT": "server.port",
    "CONFERENCE_MAPPER_PHONELIST": "phone_list",
    "CONFERENCE_MAPPER_ID_LENGTH": "mapping.id_length",
    "CONFERENCE_MAPPER_COLLISION_ATTEMPTS": "mapping.collision_attempts",
    "CONFERENCE_MAPPER_LOG_LEVEL": "logging.level",
}


@dataclass(frozen=True)
class MapperSettings:
    database: Path = Path("mapper.db")
    host: str = "0.0.0.0"
    port: int = 9000
    phone_list: str | None = None
    id_length: int = 6
    collision_attempts: int = DEFAULT_COLLISION_ATTEMPTS
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        validate_digits(self.id_length)
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"Invalid port: {self.port}")
        if self.collision_attempts < 1:
            raise ConfigurationError(
                f"collision_attempts must be at least one, got {self.collision_attempts}"
            )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "MapperSettings":
        """Build settings from a nested mapping shaped like ``configs/default.yaml``."""
        merged = apply_overrides(DEFAULTS, _flatten(config))
        phone_list = get_by_dotted_path(merged, "phone_list")
        if isinstance(phone_list, (list, tuple)):
            phone_list = json.dumps(list(phone_list))
        return cls(
            database=Path(str(get_by_dotted_path(merged, "store.database"))),
            host=str(get_by_dotted_path(merged, "server.host")),
            port=_as_int(get_by_dotted_path(merged, "server.port"), "server.port"),
            phone_list=None if phone_list in (None, "") else str(phone_list),
            id_length=_as_int(get_by_dotted_path(merged, "mapping.id_length"), "mapping.id_length"),
            collision_attempts=_as_int(
                get_by_dotted_path(merged, "mapping.collision_attempts"),
                "mapping.collision_attempts",
            ),
            log_level=str(get_by_dotted_path(merged, "logging.level")),
        )


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from exc


def _flatten(config: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in config.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def load_settings(
    config_path: Path | None = None,
    *,
    cli_overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> MapperSettings:
    """
    Resolve the effective settings.

    Parameters
    ----------
    config_path:
        Optional YAML file; see ``configs/default.yaml``.
    cli_overrides:
        Dotted-path overrides from the command line. ``None`` values are ignored.
    environ:
        Environment to read; defaults to ``os.environ``.

    Raises
    ------
    ConfigurationError
        If any layer produces an invalid value.
    """
    environ = os.environ if environ is None else environ
    try:
        from_file = load_config(config_path)
    except (yaml.YAMLError, ValueError) as exc:
        raise ConfigurationError(f"Invalid configuration file {config_path}: {exc}") from exc
    layered = apply_overrides(from_file, env_overrides(environ, ENV_VARIABLES))
    layered = apply_overrides(layered, cli_overrides or {})
    return MapperSettings.from_mapping(layered)
