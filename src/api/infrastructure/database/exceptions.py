"""Database-specific exceptions shared across bounded contexts."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when the store cannot serve a connection.

    Covers both an exhausted connection pool (no connection became free
    within the pool timeout) and an unreachable database server.
    """

    pass
