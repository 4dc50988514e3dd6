"""Configuration loading and layering helpers."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Sequence

import yaml


def load_config(config_path: Path | None) -> dict[str, Any]:
    """
    Parse a YAML configuration file into a nested mapping.

    ``None`` yields an empty mapping so the server can start from built-in
    defaults and environment variables alone. A path that does not exist is an
    error: a typo in ``--config`` should not silently fall back to defaults.
    """
    if config_path is None:
        return {}
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, Mapping):
        raise ValueError(f"Configuration root in {config_path} must be a mapping.")
    return dict(loaded)


def clone_config(config: Mapping[str, Any]) -> dict[str, Any]:
    """Return a deep copy of the configuration mapping."""
    return copy.deepcopy(dict(config))


def set_by_dotted_path(
    config: MutableMapping[str, Any],
    dotted_key: str,
    value: Any,
) -> None:
    """
    Assign a value inside a nested mapping using dotted-path syntax.

    Examples
    --------
    >>> cfg = {"mapping": {"id_length": 6}}
    >>> set_by_dotted_path(cfg, "mapping.id_length", 9)
    >>> cfg["mapping"]["id_length"]
    9
    """
    keys: Sequence[str] = dotted_key.split(".")
    current: MutableMapping[str, Any] = config
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], MutableMapping):
            current[key] = {}
        current = current[key]  # type: ignore[assignment]
    current[keys[-1]] = value


def get_by_dotted_path(config: Mapping[str, Any], dotted_key: str, default: Any = None) -> Any:
    """Fetch a value from a nested mapping using dotted-path syntax."""
    current: Any = config
    for key in dotted_key.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return current


def apply_overrides(
    config: Mapping[str, Any],
    overrides: Mapping[str, Any],
) -> dict[str, Any]:
    """
    Return a copy of ``config`` with dotted-path ``overrides`` applied.

    ``None`` values are skipped so unset CLI flags leave lower layers intact.
    """
    merged = clone_config(config)
    for dotted_key, value in overrides.items():
        if value is None:
            continue
        set_by_dotted_path(merged, dotted_key, value)
    return merged


def env_overrides(
    environ: Mapping[str, str],
    env_map: Mapping[str, str],
) -> dict[str, str]:
    """Collect ``{dotted_key: value}`` for every variable in ``env_map`` that is set."""
    return {
        dotted_key: environ[variable]
        for variable, dotted_key in env_map.items()
        if environ.get(variable, "") != ""
    }
