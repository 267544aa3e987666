from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from .config import settings


def _engine_options(database_url: str) -> dict:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        return {}
    options = {"pool_pre_ping": True}
    if url.get_driver_name() == "asyncpg":
        # The hosted Postgres sits behind a transaction pooler: no prepared statement cache
        options["connect_args"] = {"statement_cache_size": 0}
    return options


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    **_engine_options(settings.DATABASE_URL),
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session of the hosted database.
    Used as Depends(get_db) in routers.
    """
    async with AsyncSessionLocal() as session:
        yield session
