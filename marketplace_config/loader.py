"""
Configuration Loader (``marketplace_config.loader``).

Responsibility
--------------
Loads a YAML settings file and environment overrides and parses them into
a frozen ``MarketplaceSettings``.  Callers go through
``marketplace_config.get_active_settings()``.

Invariants enforced
-------------------
* Unknown keys in the YAML file are rejected (typos must not silently fall
  back to defaults).
* Money-like values (``deposit_cap_ratio``) are parsed through ``str`` into
  ``Decimal``, never via float arithmetic.
* Environment overrides win over the file: ``MARKETPLACE_DATABASE_URL``,
  then ``DATABASE_URL``, then ``MARKETPLACE_LOG_LEVEL``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Bad values / unknown keys  -> ``ValueError``.
"""

from __future__ import annotations

from dataclasses import fields
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping

import yaml

from marketplace_config.schema import MarketplaceSettings

_ENV_DATABASE_URLS = ("MARKETPLACE_DATABASE_URL", "DATABASE_URL")
_ENV_LOG_LEVEL = "MARKETPLACE_LOG_LEVEL"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def load_settings_file(path: Path) -> dict[str, Any]:
    """Read one YAML settings file.  An empty file yields an empty dict."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    section = data.get("marketplace", data)
    if not isinstance(section, dict):
        raise ValueError(f"{path}: 'marketplace' must be a mapping")
    return dict(section)


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{name}: not a boolean: {value!r}")


def _parse_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name}: not an integer: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name}: not an integer: {value!r}") from exc


def _parse_decimal(name: str, value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{name}: not a decimal: {value!r}") from exc


_PARSERS = {
    "database_url": lambda name, v: str(v),
    "echo_sql": _parse_bool,
    "pool_size": _parse_int,
    "max_overflow": _parse_int,
    "pool_timeout": _parse_int,
    "deposit_cap_ratio": _parse_decimal,
    "best_clients_default_limit": _parse_int,
    "log_level": lambda name, v: str(v).upper(),
}


def parse_settings(
    raw: Mapping[str, Any],
    environ: Mapping[str, str] | None = None,
) -> MarketplaceSettings:
    """
    Build settings from a raw mapping plus environment overrides.

    Raises:
        ValueError: On unknown keys or unparsable values.
    """
    known = {f.name for f in fields(MarketplaceSettings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown setting(s): {', '.join(unknown)}")

    values = {key: _PARSERS[key](key, value) for key, value in raw.items()}

    environ = environ or {}
    for env_name in _ENV_DATABASE_URLS:
        if environ.get(env_name):
            values["database_url"] = environ[env_name]
            break
    if environ.get(_ENV_LOG_LEVEL):
        values["log_level"] = environ[_ENV_LOG_LEVEL].upper()

    return MarketplaceSettings(**values)
