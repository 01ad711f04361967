import logging

from sqlalchemy import BigInteger, Integer, text
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


class Database:
    """
    Managed connection handle: one engine plus its session factory.

    Created once at application startup and handed to the stores that need
    it; disposed at shutdown.
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 10,
    ):
        engine_kwargs = {"echo": echo}
        # SQLite (used in tests) has no connection pool sizing
        if not url.startswith("sqlite"):
            engine_kwargs.update(pool_size=pool_size, max_overflow=max_overflow)

        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def init(self) -> None:
        """Create tables that do not exist yet."""
        # Register models on Base.metadata before create_all
        import database.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def close(self) -> None:
        """Close database engine and connections."""
        await self.engine.dispose()
        logger.info("Database connections closed")


# Primary key type: BIGINT in production, INTEGER on SQLite so that
# autoincrement works there
IdType = BigInteger().with_variant(Integer, "sqlite")
