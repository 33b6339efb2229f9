"""Database initialization and ORM setup."""
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool
import logging

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def normalize_database_url(url: str) -> str:
    """Point plain driver URLs at their async drivers.

    `postgres://` and `postgresql://` become `postgresql+asyncpg://`,
    `sqlite://` becomes `sqlite+aiosqlite://`. URLs that already name a
    driver are returned untouched.
    """
    scheme, sep, rest = url.partition("://")
    if not sep:
        raise ValueError(f"Invalid database URL: {url!r}")
    if scheme in ("postgres", "postgresql"):
        return f"postgresql+asyncpg://{rest}"
    if scheme == "sqlite":
        return f"sqlite+aiosqlite://{rest}"
    return url


def _is_memory_sqlite(url: str) -> bool:
    if not url.startswith("sqlite"):
        return False
    path = url.partition("://")[2]
    return path in ("", "/", "/:memory:") or "mode=memory" in path


def create_engine(database_url: str) -> AsyncEngine:
    """Create the async engine (and its connection pool) for `database_url`."""
    url = normalize_database_url(database_url)
    kwargs = {
        "echo": False,  # Disable SQL echo to prevent logging
        "pool_pre_ping": True,
    }
    if _is_memory_sqlite(url):
        # An in-memory database lives inside one connection; share it.
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    engine = create_async_engine(url, **kwargs)
    if url.startswith("sqlite"):
        # SQLite ignores foreign keys unless asked per connection.
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine):
    """Initialize database tables."""
    logger.info(f"Initializing database: {engine.url.get_backend_name()}")

    try:
        # Import models to register with Base
        import nodefleet.models  # noqa: F401

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise
