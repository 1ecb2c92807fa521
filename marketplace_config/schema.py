"""
Configuration schema (``marketplace_config.schema``).

Frozen dataclasses describing runtime settings.  Parsed by
``marketplace_config.loader``; consumed by ``marketplace_services``, which
passes individual values into kernel services.  The kernel never imports
this package.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///marketplace.sqlite3"


@dataclass(frozen=True)
class MarketplaceSettings:
    """Resolved runtime settings for one process."""

    database_url: str = DEFAULT_DATABASE_URL
    echo_sql: bool = False
    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30
    deposit_cap_ratio: Decimal = Decimal("0.25")
    best_clients_default_limit: int = 2
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.database_url:
            raise ValueError("database_url must not be empty")
        if not (Decimal("0") <= self.deposit_cap_ratio <= Decimal("1")):
            raise ValueError(
                f"deposit_cap_ratio must be within [0, 1], got {self.deposit_cap_ratio}"
            )
        if self.best_clients_default_limit < 1:
            raise ValueError(
                "best_clients_default_limit must be positive, "
                f"got {self.best_clients_default_limit}"
            )
        for name in ("pool_size", "max_overflow", "pool_timeout"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
