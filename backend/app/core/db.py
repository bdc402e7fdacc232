import asyncio
from contextlib import asynccontextmanager
from typing import Optional
from psycopg_pool import AsyncConnectionPool
from app.core.settings import settings

_pool: Optional[AsyncConnectionPool] = None
_pool_lock: Optional[asyncio.Lock] = None

def _normalize_conninfo(url: str) -> str:
    """Normalize the database connection string for psycopg_pool."""
    if url.startswith("postgresql+psycopg2://") or url.startswith("postgresql+psycopg://"):
        return "postgresql://" + url.split("://", 1)[1]
    if url.startswith("postgres://"):
        return "postgresql://" + url.split("://", 1)[1]
    return url

def _connect_kwargs() -> dict:
    kwargs = {}
    if settings.database_sslmode:
        kwargs["sslmode"] = settings.database_sslmode
    return kwargs

async def get_pool() -> AsyncConnectionPool:
    """Return the database connection pool, opening it once on first use."""
    global _pool, _pool_lock
    if _pool is not None:
        return _pool
    if _pool_lock is None:
        _pool_lock = asyncio.Lock()
    async with _pool_lock:
        # another request may have opened it while we waited
        if _pool is None:
            conninfo = _normalize_conninfo(settings.database_url)
            pool = AsyncConnectionPool(
                conninfo,
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
                kwargs=_connect_kwargs(),
                open=False,
            )
            try:
                await pool.open(wait=True)  # Wait until connections are ready
            except Exception:
                await pool.close()
                raise
            _pool = pool
    return _pool

@asynccontextmanager
async def db_conn():
    """Check out a connection for one unit of work; it goes back to the pool on exit."""
    pool = await get_pool()
    async with pool.connection() as conn:
        async with conn.cursor() as cur:
            yield conn, cur

async def close_pool():
    """Cleanly close the connection pool."""
    global _pool, _pool_lock
    if _pool is not None:
        await _pool.close()
        _pool = None
    # the lock belongs to the loop that is shutting down
    _pool_lock = None
