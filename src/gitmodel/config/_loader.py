# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Layered settings loading: defaults, TOML file, environment, overrides."""

import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, TypeAlias

from pydantic import ValidationError

from gitmodel.config._models import GitSettings
from gitmodel.exceptions import ConfigLoadError, ConfigValidationError

ENV_PREFIX: Final = "GITMODEL_"

# Environment separator standing in for "." between nested keys
ENV_NESTING: Final = "__"

# Table holding gitmodel settings inside a shared TOML file such as pyproject.toml
TOML_TABLE: Final = "gitmodel"

ConfigDict: TypeAlias = dict[str, Any]  # pyright: ignore[reportExplicitAny]


def read_toml_file(path: Path) -> ConfigDict:
    """Load a TOML document.

    Raises:
        FileNotFoundError: If `path` is missing.
        ConfigLoadError: If the document is not valid TOML.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigLoadError(
            f"Failed to parse TOML file {path}: {e}",
            path=path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def deep_merge(
    base: Mapping[str, Any],  # pyright: ignore[reportExplicitAny]
    override: Mapping[str, Any],  # pyright: ignore[reportExplicitAny]
) -> ConfigDict:
    """Recursively layer `override` on top of `base`.

    Tables present on both sides are merged key by key; any other value from
    `override` wins outright. The result shares no mutable state with either
    input.
    """
    merged = {key: _copy_value(value) for key, value in base.items()}
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = _copy_value(value)
    return merged


def _copy_value(value: Any) -> Any:  # pyright: ignore[reportExplicitAny]
    if isinstance(value, Mapping):
        return {key: _copy_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_copy_value(item) for item in value]
    return value


def set_nested_key(
    config: ConfigDict,
    dotted_key: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Assign `value` at a dotted path like "logging.level", creating tables.

    A non-table value already sitting on the path is replaced by a table.
    """
    *tables, leaf = dotted_key.split(".")
    target = config
    for table in tables:
        if not isinstance(target.get(table), dict):
            target[table] = {}
        target = target[table]
    target[leaf] = value


def parse_env_vars(
    environ: Mapping[str, str] | None = None,
    prefix: str = ENV_PREFIX,
) -> ConfigDict:
    """Collect settings from prefixed environment variables.

    GITMODEL_TIMEOUT_MS sets `timeout_ms`; GITMODEL_LOGGING__LEVEL sets
    `logging.level`. Names are lower-cased after the prefix is removed.

    Args:
        environ: Variables to scan. Defaults to os.environ.
        prefix: Prefix selecting gitmodel variables.

    Returns:
        Nested settings mapping.
    """
    source = os.environ if environ is None else environ
    config: ConfigDict = {}
    for name, raw in source.items():
        key = name.removeprefix(prefix)
        if key == name or not key:
            continue
        set_nested_key(config, key.replace(ENV_NESTING, ".").lower(), _decode(raw))
    return config


def _decode(raw: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Decode an environment value: integer, JSON object, else the raw string."""
    if raw.lstrip("-").isdigit():
        return int(raw)
    if raw.startswith("{") and raw.endswith("}"):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return raw
    return raw


def load_settings(
    path: Path | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
    environ: Mapping[str, str] | None = None,
) -> GitSettings:
    """Build GitSettings from layered sources.

    Later sources win: model defaults, the TOML file at `path` (its
    `[gitmodel]` table if it has one, otherwise the whole document),
    GITMODEL_* environment variables, then `overrides`.

    Args:
        path: Optional TOML file. It must exist when given.
        overrides: Explicit values, e.g. from a command line.
        environ: Environment to read. Defaults to os.environ.

    Returns:
        The validated settings.

    Raises:
        FileNotFoundError: If `path` does not exist.
        ConfigLoadError: If the TOML file cannot be parsed.
        ConfigValidationError: If a merged value is invalid.
    """
    layers: list[Mapping[str, Any]] = []  # pyright: ignore[reportExplicitAny]
    if path is not None:
        document = read_toml_file(path)
        table = document.get(TOML_TABLE)
        layers.append(table if isinstance(table, dict) else document)
    layers.append(parse_env_vars(environ))
    if overrides:
        layers.append(overrides)

    merged: ConfigDict = {}
    for layer in layers:
        merged = deep_merge(merged, layer)

    try:
        return GitSettings.model_validate(merged)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ()))
        expected = first.get("ctx", {}).get("expected", first.get("type"))
        raise ConfigValidationError(
            f"Invalid configuration value for '{key}': {first.get('msg')}",
            key=key,
            value=first.get("input"),
            expected=str(expected),
        ) from e
