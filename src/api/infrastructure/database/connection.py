"""Connection-failure translation at transaction boundaries.

SQLAlchemy reports an exhausted pool as ``sqlalchemy.exc.TimeoutError`` and an
unreachable server as ``OperationalError`` / ``InterfaceError``. Callers that
own a transaction wrap it in :func:`translate_connection_errors` so that both
surface as a single :class:`DatabaseConnectionError`.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from infrastructure.database.exceptions import DatabaseConnectionError
from infrastructure.observability import ConnectionProbe, DefaultConnectionProbe

__all__ = ["translate_connection_errors"]


@asynccontextmanager
async def translate_connection_errors(
    probe: ConnectionProbe | None = None,
) -> AsyncIterator[None]:
    """Re-raise pool and connectivity failures as DatabaseConnectionError.

    Args:
        probe: Optional connection probe for observability

    Raises:
        DatabaseConnectionError: If the pool is exhausted or the store is down
    """
    probe = probe or DefaultConnectionProbe()
    try:
        yield
    except PoolTimeoutError as e:
        probe.pool_exhausted(timeout_seconds=None)
        raise DatabaseConnectionError(
            "No database connection available (pool exhausted)"
        ) from e
    except (OperationalError, InterfaceError) as e:
        # Constraint violations arrive as IntegrityError and are not caught here.
        probe.connection_failed(e)
        raise DatabaseConnectionError(f"Database unreachable: {e}") from e
