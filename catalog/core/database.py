"""Async database engine, session management and bounded store operations.

Configures the SQLAlchemy async engine with connection pooling, provides the
per-request session dependency, and wraps every store call in a short
timeout that surfaces as StoreUnavailableError.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from catalog.core.config import settings
from catalog.core.errors import ConflictError, StoreUnavailableError

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FK enforcement for SQLite connections.

    SQLite ignores ON DELETE CASCADE unless the pragma is set on every new
    connection. No-op for other dialects.

    Args:
        engine: Async engine to configure.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, _connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    settings.database_url,
    echo=settings.environment == "development",
    pool_pre_ping=True,
)
enable_sqlite_foreign_keys(engine)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def store_operation(name: str) -> AsyncIterator[None]:
    """Bound a single store operation by the configured timeout.

    The timeout is scoped to the block and released on every exit path.
    Nothing is retried here; retry policy belongs to the caller.

    Usage:
        async with store_operation("products.fetch"):
            result = await db.execute(stmt)

    Args:
        name: Operation label used in log records.

    Raises:
        StoreUnavailableError: On timeout or driver/transport failure.
        ConflictError: On an unhandled constraint violation.
    """
    try:
        async with asyncio.timeout(settings.store_timeout_seconds):
            yield
    except TimeoutError as exc:
        logger.warning(
            "Store operation %s exceeded %.1fs", name, settings.store_timeout_seconds
        )
        raise StoreUnavailableError() from exc
    except IntegrityError as exc:
        logger.info("Store operation %s violated a constraint", name)
        raise ConflictError(
            code="CONSTRAINT_VIOLATION",
            message="A database constraint was violated.",
        ) from exc
    except (OperationalError, InterfaceError, OSError) as exc:
        logger.warning("Store operation %s failed: %s", name, type(exc).__name__)
        raise StoreUnavailableError() from exc
    except DBAPIError as exc:
        if exc.connection_invalidated:
            logger.warning("Store operation %s lost its connection", name)
            raise StoreUnavailableError() from exc
        raise
