"""
marketplace_config -- single public entrypoint for runtime settings.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_active_settings()``.  No other component reads settings files or
    environment variables directly.

Architecture position:
    Configuration.  Sits above ``marketplace_kernel`` and below
    ``marketplace_services``.  The kernel MUST NEVER import from
    ``marketplace_config``; the services layer passes values in.

Failure modes:
    - ``FileNotFoundError`` -- explicit config_path does not exist.
    - ``ValueError`` -- unknown keys or invalid values.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from marketplace_config.loader import load_settings_file, parse_settings
from marketplace_config.schema import DEFAULT_DATABASE_URL, MarketplaceSettings

_logger = logging.getLogger("marketplace_kernel.config")

DEFAULT_SETTINGS_FILE = Path(__file__).parent / "settings" / "default.yaml"


def get_active_settings(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> MarketplaceSettings:
    """The ONLY public settings entrypoint.

    Args:
        config_path: YAML file to read.  Defaults to the packaged
            ``settings/default.yaml``.
        environ: Environment mapping for overrides.  Defaults to
            ``os.environ``.

    Returns:
        Frozen, validated ``MarketplaceSettings``.
    """
    path = config_path or DEFAULT_SETTINGS_FILE
    raw = load_settings_file(path)
    settings = parse_settings(raw, os.environ if environ is None else environ)

    _logger.info(
        "MARKETPLACE_CONFIG_TRACE",
        extra={
            "config_path": str(path),
            "dialect": settings.database_url.split(":", 1)[0],
            "deposit_cap_ratio": str(settings.deposit_cap_ratio),
            "best_clients_default_limit": settings.best_clients_default_limit,
        },
    )
    return settings


__all__ = [
    "DEFAULT_DATABASE_URL",
    "DEFAULT_SETTINGS_FILE",
    "MarketplaceSettings",
    "get_active_settings",
    "load_settings_file",
    "parse_settings",
]
