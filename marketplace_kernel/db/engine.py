"""
Module: marketplace_kernel.db.engine
Responsibility: SQLAlchemy engine construction, session factory creation,
    and the transactional scope used around every ledger operation.
Architecture position: Kernel > DB.  May import from db/base.py and
    logging_config.  MUST NOT import from services/, selectors/, domain/,
    or outer layers (except create_tables/drop_tables which import models).

Invariants enforced:
    - No ambient connection state.  Engines and session factories are
      returned to the caller and injected explicitly; nothing is cached at
      module level.
    - PostgreSQL sessions run at READ COMMITTED with explicit row-level
      locking (SELECT ... FOR UPDATE) where a balance decision is made.
    - SQLite is supported for local runs and tests.  It has no row locks,
      so it serializes writers at the database level instead.  Foreign keys
      are switched on for every SQLite connection.

Failure modes:
    - OperationalError on lock timeout or deadlock (surfaced through
      session_scope as a rollback + re-raise).
    - Connection pool exhaustion if pool_size + max_overflow is exceeded.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from marketplace_kernel.logging_config import get_logger

logger = get_logger("db.engine")


def create_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 20,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Build an engine for the ledger store.

    PostgreSQL URLs get a QueuePool at READ COMMITTED.  SQLite URLs get
    foreign-key enforcement, and in-memory SQLite gets a StaticPool so every
    session sees the same database.

    Args:
        database_url: SQLAlchemy URL (postgresql://... or sqlite+pysqlite://...)
        echo: If True, log all SQL statements.
        pool_size: Number of connections to keep in the pool (PostgreSQL).
        max_overflow: Max connections beyond pool_size (PostgreSQL).
        pool_pre_ping: If True, test connections before use.
        pool_timeout: Seconds to wait for a pooled connection.
        pool_recycle: Seconds after which a connection is recycled.

    Returns:
        SQLAlchemy Engine instance.
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        kwargs: dict = {"echo": echo}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(
            url,
            echo=echo,
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=pool_pre_ping,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
            isolation_level="READ COMMITTED",
        )

    logger.info(
        "engine_initialized",
        extra={
            "dialect": engine.dialect.name,
            "database": url.database,
            "echo": echo,
        },
    )
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """
    Create the session factory for an engine.

    Each ledger operation takes one session from the factory, so concurrent
    requests never share a session.
    """
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(
    session_factory: sessionmaker[Session],
) -> Generator[Session, None, None]:
    """
    Provide a transactional scope around a single ledger operation.

    Postconditions: On normal exit, the session is committed and closed.
        On any exception (business rule or store failure) the session is
        rolled back and closed, and the exception is re-raised.  No partial
        balance or job update ever escapes.

    Usage:
        with session_scope(factory) as session:
            PaymentService(session, clock).pay_job(job_id, caller_id)
    """
    session = session_factory()
    logger.debug("transaction_started")
    try:
        yield session
        session.commit()
        logger.debug("transaction_committed")
    except Exception as exc:
        session.rollback()
        logger.info(
            "transaction_rolled_back",
            extra={"reason": getattr(exc, "code", type(exc).__name__)},
        )
        raise
    finally:
        session.close()


def create_tables(engine: Engine) -> None:
    """
    Create all ledger tables.

    Importing marketplace_kernel.models registers every table on
    Base.metadata before create_all runs.
    """
    from marketplace_kernel.db.base import Base
    import marketplace_kernel.models  # noqa: F401

    Base.metadata.create_all(engine)
    logger.info("tables_created", extra={"tables": sorted(Base.metadata.tables)})


def drop_tables(engine: Engine) -> None:
    """
    Drop all tables. Use with caution - primarily for testing.
    """
    from marketplace_kernel.db.base import Base
    import marketplace_kernel.models  # noqa: F401

    Base.metadata.drop_all(engine)


def is_postgres(engine: Engine) -> bool:
    """Check if the engine is PostgreSQL."""
    return engine.dialect.name == "postgresql"
