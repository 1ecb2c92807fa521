"""
marketplace_services.bootstrap -- process startup wiring.

Builds the engine, session factory and gateway from ``MarketplaceSettings``.
The result is handed to whatever hosts the gateway (a web app, a script);
nothing is stored at module level.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from marketplace_config import MarketplaceSettings, get_active_settings
from marketplace_kernel.db.engine import (
    create_engine_from_url,
    create_session_factory,
    create_tables,
    is_postgres,
)
from marketplace_kernel.db.immutability import register_immutability_listeners
from marketplace_kernel.domain.clock import Clock
from marketplace_kernel.logging_config import configure_logging, get_logger
from marketplace_services.gateway import MarketplaceGateway

logger = get_logger("services.bootstrap")


@dataclass(frozen=True)
class MarketplaceRuntime:
    """Everything a host process needs, owned by that process."""

    settings: MarketplaceSettings
    engine: Engine
    session_factory: sessionmaker[Session]
    gateway: MarketplaceGateway

    def dispose(self) -> None:
        self.engine.dispose()


def build_runtime(
    settings: MarketplaceSettings | None = None,
    clock: Clock | None = None,
    create_schema: bool = False,
) -> MarketplaceRuntime:
    """
    Wire a gateway from settings.

    Args:
        settings: Resolved settings; ``get_active_settings()`` when omitted.
        clock: Clock for payment timestamps; system clock when omitted.
        create_schema: Create missing tables before returning.
    """
    settings = settings or get_active_settings()
    configure_logging(level=settings.log_level)
    register_immutability_listeners()

    engine = create_engine_from_url(
        settings.database_url,
        echo=settings.echo_sql,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
    )
    if create_schema:
        create_tables(engine)

    session_factory = create_session_factory(engine)
    gateway = MarketplaceGateway(
        session_factory,
        clock=clock,
        deposit_cap_ratio=settings.deposit_cap_ratio,
        best_clients_default_limit=settings.best_clients_default_limit,
    )
    if not is_postgres(engine):
        logger.warning(
            "row_locks_unavailable", extra={"dialect": engine.dialect.name}
        )
    logger.info("runtime_ready", extra={"dialect": engine.dialect.name})
    return MarketplaceRuntime(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        gateway=gateway,
    )
