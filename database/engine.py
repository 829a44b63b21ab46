import logging
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Integer, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


# Base class for declarative models
class Base(DeclarativeBase):
    pass


def create_db_engine(database_url: str, echo: bool = False, **engine_options) -> AsyncEngine:
    """Create an async engine for the given URL; extra options go to SQLAlchemy."""
    logger.info(f"Connecting to database at {database_url.split('@')[-1]}")
    engine = create_async_engine(database_url, echo=echo, **engine_options)

    if engine.dialect.name == "sqlite":
        # SQLite ignores foreign keys (and so cascades) unless asked per connection
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session maker handed to repositories."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# Function to initialize the database (create tables)
async def init_db(engine: AsyncEngine) -> None:
    import database.models  # noqa: F401  register mappers

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Function to close database connections
async def close_db(engine: AsyncEngine) -> None:
    """Close database engine and connections."""
    await engine.dispose()


# BIGINT ids in production; SQLite only autoincrements INTEGER primary keys
BigIntegerId = BigInteger().with_variant(Integer(), "sqlite")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
