"""
Database client factories.

Provides the Supabase service-role client (production document store) and
a bounded psycopg2 connection pool (development relational store). Both are
created lazily, once per process, and reused by reference. The service
container in ``api.dependencies`` is the only caller in application code.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from psycopg2.extensions import connection as PGConnection
from psycopg2.pool import ThreadedConnectionPool
from supabase import create_client, Client

from .config import get_settings

# Module-level client cache
_service_client: Optional[Client] = None
_connection_pool: Optional[ThreadedConnectionPool] = None


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    The backend reads and writes user documents on behalf of verified
    identity tokens, so it needs full table access.

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def get_connection_pool() -> ThreadedConnectionPool:
    """
    Get the PostgreSQL connection pool.

    The pool is bounded by DB_POOL_MIN/DB_POOL_MAX; every unit of work
    borrows exactly one connection and returns it when done.
    """
    global _connection_pool

    if _connection_pool is None:
        settings = get_settings()
        if not settings.database_url:
            raise RuntimeError(
                "Database configuration missing. "
                "Set DATABASE_URL environment variable."
            )
        _connection_pool = ThreadedConnectionPool(
            settings.db_pool_min,
            settings.db_pool_max,
            settings.database_url,
        )

    return _connection_pool


@contextmanager
def transaction(pool: ThreadedConnectionPool) -> Iterator[PGConnection]:
    """
    Borrow a connection and run a unit of work inside a transaction.

    Commits when the block exits normally, rolls back on any exception,
    and always returns the connection to the pool.

    Usage:
        with transaction(pool) as conn:
            with conn.cursor() as cur:
                cur.execute("UPDATE users SET name = %s WHERE id = %s", (name, user_id))
    """
    conn = pool.getconn()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        pool.putconn(conn)


def close_connection_pool() -> None:
    """Close every pooled connection (application shutdown)."""
    global _connection_pool
    if _connection_pool is not None:
        _connection_pool.closeall()
        _connection_pool = None


def reset_client_cache() -> None:
    """
    Reset the cached database clients.

    Useful for testing or when configuration changes.
    """
    global _service_client, _connection_pool
    _service_client = None
    _connection_pool = None
