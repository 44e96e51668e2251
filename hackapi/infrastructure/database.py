import logging

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from hackapi.infrastructure.persistence.tables import Base

logger = logging.getLogger(__name__)


def create_engine(database_url: str) -> AsyncEngine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # SQLite busy timeout in seconds, concurrent writers wait instead of failing
        connect_args["timeout"] = 30.0
    return create_async_engine(database_url, future=True, connect_args=connect_args)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema is up to date")
