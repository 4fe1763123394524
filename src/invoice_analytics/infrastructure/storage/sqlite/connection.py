"""
Async SQLite connection pool with aiosqlite.

Provides connection management with proper async context handling. Pools
are owned by the application lifespan (app.state); there is no module-level
pool.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from invoice_analytics.config import StorageSettings, get_logger

logger = get_logger(__name__)


def _casefold(value: object) -> object:
    """Unicode-aware case folding for SQL text comparisons."""
    return value.casefold() if isinstance(value, str) else value


class ConnectionPool:
    """
    Async SQLite connection pool.

    Manages a pool of connections with configurable size. A read-only pool
    opens the file with ``mode=ro`` and sets ``PRAGMA query_only`` so no
    statement run through it can modify the database.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
        read_only: bool = False,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self.read_only = read_only

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: StorageSettings, read_only: bool = False) -> "ConnectionPool":
        return cls(
            db_path=settings.db_path,
            pool_size=settings.read_only_pool_size if read_only else settings.pool_size,
            busy_timeout=settings.busy_timeout,
            read_only=read_only,
        )

    async def initialize(self) -> None:
        """Initialize the connection pool."""
        async with self._lock:
            if self._initialized:
                return

            if not self.read_only:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)

            for _ in range(self.pool_size):
                conn = await self._create_connection()
                self._connections.append(conn)
                await self._pool.put(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
                read_only=self.read_only,
            )

    async def _create_connection(self) -> aiosqlite.Connection:
        """Create a new database connection with optimized settings."""
        if self.read_only:
            uri = f"file:{self.db_path.resolve().as_posix()}?mode=ro"
            conn = await aiosqlite.connect(uri, uri=True)
            await conn.execute("PRAGMA query_only=ON")
        else:
            conn = await aiosqlite.connect(self.db_path)
            # WAL lets readers run alongside the writer
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA synchronous=NORMAL")

        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        await conn.execute("PRAGMA foreign_keys=ON")
        await conn.create_function("casefold", 1, _casefold, deterministic=True)

        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection from the pool.

        Usage:
            async with pool.acquire() as conn:
                await conn.execute(...)
        """
        if not self._initialized:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        finally:
            await self._pool.put(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection with transaction context.

        Automatically commits on success, rolls back on exception.
        """
        async with self.acquire() as conn:
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection inside an explicit read transaction.

        Every SELECT issued within the block sees the same database state,
        so paired data/count queries agree with each other.
        """
        async with self.acquire() as conn:
            await conn.execute("BEGIN")
            try:
                yield conn
            finally:
                await conn.rollback()

    async def close(self) -> None:
        """Close all connections in the pool."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._pool = asyncio.Queue(maxsize=self.pool_size)
            self._initialized = False
            logger.info("connection_pool_closed", read_only=self.read_only)
