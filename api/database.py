"""
database.py
-----------
Bounded MySQL connection pool shared by the request handlers.

One ConnectionPool is built during application startup, stored on
``app.state.pool`` and disposed at shutdown. Handlers borrow connections with
``with pool.connection() as conn:`` so the connection goes back to the pool on
every exit path.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Union

import logfire
from fastapi import Request
from sqlalchemy import create_engine, exc
from sqlalchemy.engine import URL, Connection, make_url
from sqlalchemy.pool import QueuePool

import config
from errors import DatabaseConnectionError, QueryError


def build_database_url() -> Union[str, URL]:
    """DATABASE_URL when set, otherwise a PyMySQL URL assembled from the DB_* settings."""
    if config.DATABASE_URL:
        return config.DATABASE_URL
    return URL.create(
        "mysql+pymysql",
        username=config.DB_USER or None,
        password=config.DB_PASSWORD or None,
        host=config.DB_HOST,
        port=config.DB_PORT,
        database=config.DB_NAME or None,
        query={"charset": "utf8mb4"},
    )


def _error_message(error: Exception) -> str:
    # Prefer the driver's own message over SQLAlchemy's wrapper text
    original = getattr(error, "orig", None)
    return str(original) if original is not None else str(error)


class ConnectionPool:
    """
    Up to ``size`` open connections; callers beyond that wait for one to be released.

    ``timeout`` bounds that wait in seconds. ``None`` waits indefinitely.
    """

    def __init__(
        self,
        url: Union[str, URL],
        size: int = 10,
        timeout: Optional[float] = None,
        recycle: int = 3600,
        connect_args: Optional[Dict[str, Any]] = None,
    ):
        self.size = size
        self.engine = create_engine(
            url,
            poolclass=QueuePool,
            pool_size=size,
            max_overflow=0,
            pool_timeout=timeout,
            pool_recycle=recycle,
            pool_pre_ping=True,
            connect_args=connect_args or {},
        )

    @classmethod
    def from_settings(cls) -> "ConnectionPool":
        url = build_database_url()
        connect_args: Dict[str, Any] = {}
        if make_url(url).get_backend_name() == "mysql":
            connect_args = {
                "connect_timeout": config.DB_CONNECT_TIMEOUT,
                "read_timeout": config.DB_QUERY_TIMEOUT,
                "write_timeout": config.DB_QUERY_TIMEOUT,
            }
        pool = cls(
            url,
            size=config.DB_POOL_SIZE,
            timeout=config.DB_POOL_TIMEOUT,
            recycle=config.DB_POOL_RECYCLE,
            connect_args=connect_args,
        )
        logfire.info(
            "Database connection pool created",
            host=config.DB_HOST,
            database=config.DB_NAME,
            size=pool.size,
        )
        return pool

    @property
    def in_use(self) -> int:
        """Number of connections currently checked out."""
        return self.engine.pool.checkedout()

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        """
        Borrow a connection for the duration of a ``with`` block.

        Raises:
            DatabaseConnectionError: If no connection could be opened or the wait timed out.
            QueryError: If a statement inside the block fails.
        """
        try:
            conn = self.engine.connect()
        except (exc.DBAPIError, exc.TimeoutError) as e:
            raise DatabaseConnectionError(_error_message(e)) from e
        try:
            yield conn
        except exc.DBAPIError as e:
            raise QueryError(_error_message(e)) from e
        finally:
            conn.close()

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()
        logfire.info("Database connection pool closed")


def get_pool(request: Request) -> ConnectionPool:
    """
    Dependency returning the pool built at startup.
    Use this in FastAPI endpoints with Depends(get_pool)
    """
    return request.app.state.pool
