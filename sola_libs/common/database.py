"""Shared PostgreSQL connection pool.

One ``PostgresPool`` is built at startup and handed to every adapter that
reads the corpus (the pgvector store and the topic index), so they share a
single asyncpg pool.

Connection management
- The asyncpg pool is created on first use and reused across requests
- Every connection registers the pgvector codec
- Queries go through ``fetch``/``fetchval`` for uniform error handling
"""

import asyncio
from typing import Any, List, Optional

import asyncpg
from asyncpg import Connection, Pool, Record
from pgvector.asyncpg import register_vector
import structlog

logger = structlog.get_logger("database.postgres")


class DatabaseError(Exception):
    """Base exception for database operations."""
    pass


class DatabaseConnectionError(DatabaseError):
    """The pool could not be created."""
    pass


class DatabaseQueryError(DatabaseError):
    """A query failed."""
    pass


class PostgresPool:
    """Lazily created asyncpg pool with pgvector support."""

    def __init__(
        self,
        dsn: str,
        pool_size: int = 10,
        max_queries: int = 50000,
        command_timeout: int = 60,
    ):
        """Configure the pool.

        Parameters
        - dsn: PostgreSQL DSN including database and credentials
        - pool_size: Max size of the asyncpg connection pool
        - max_queries: Queries per connection before recycling
        - command_timeout: Seconds to allow per DB command
        """
        if not dsn:
            raise ValueError("PostgresPool requires a DSN")
        self.dsn = dsn
        self.pool_size = pool_size
        self.max_queries = max_queries
        self.command_timeout = command_timeout
        self._pool: Optional[Pool] = None

    async def _init_connection(self, conn: Connection) -> None:
        """Register the pgvector codec for a new connection."""
        await register_vector(conn)

    async def get_pool(self) -> Pool:
        """Get or create the connection pool."""
        if self._pool is None:
            try:
                self._pool = await asyncpg.create_pool(
                    self.dsn,
                    min_size=1,
                    max_size=self.pool_size,
                    max_queries=self.max_queries,
                    command_timeout=self.command_timeout,
                    init=self._init_connection,
                )
                logger.info("Created PostgreSQL connection pool", pool_size=self.pool_size)
            except (OSError, asyncio.TimeoutError, asyncpg.PostgresError) as e:
                logger.error("Failed to create PostgreSQL connection pool", error=str(e))
                raise DatabaseConnectionError(f"Failed to create connection pool: {e}") from e

        return self._pool

    async def fetch(self, query: str, *args: Any) -> List[Record]:
        """Run a query and return all rows."""
        pool = await self.get_pool()
        try:
            async with pool.acquire() as conn:
                return await conn.fetch(query, *args)
        except (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.error("Query execution failed", error=str(e))
            raise DatabaseQueryError(f"Query failed: {e}") from e

    async def fetchval(self, query: str, *args: Any) -> Any:
        """Run a query and return the first column of the first row."""
        pool = await self.get_pool()
        try:
            async with pool.acquire() as conn:
                return await conn.fetchval(query, *args)
        except (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.error("Query execution failed", error=str(e))
            raise DatabaseQueryError(f"Query failed: {e}") from e

    async def health_check(self) -> bool:
        """Check that the database answers ``SELECT 1``."""
        try:
            return await self.fetchval("SELECT 1") == 1
        except DatabaseError as e:
            logger.error("Health check failed", error=str(e))
            return False

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Closed PostgreSQL connection pool")
