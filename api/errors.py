"""Database error taxonomy surfaced by the connection pool."""


class DatabaseError(Exception):
    """Base class for failures talking to the database."""


class DatabaseConnectionError(DatabaseError):
    """The pool could not hand out a connection (unreachable host, bad credentials, wait timeout)."""


class QueryError(DatabaseError):
    """A statement failed once a connection was held."""
