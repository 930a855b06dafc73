import contextlib
import sys
from collections.abc import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from src.config.settings import settings


def create_engine(url: str):
    url = str(url)
    use_echo = settings.LOG_DB
    connect_args = {}
    engine_kwargs = {}
    if "sqlite" in url:
        connect_args = {"timeout": 15}
        # aiosqlite connections are bound to the loop that opened them
        engine_kwargs["poolclass"] = NullPool
    async_engine = create_async_engine(
        url,
        echo=use_echo,
        connect_args=connect_args,
        **engine_kwargs,
    )
    if "sqlite" in url:
        _take_write_lock_on_begin(async_engine)
    return async_engine


def _take_write_lock_on_begin(async_engine: AsyncEngine) -> None:
    """SQLite has no SELECT ... FOR UPDATE; serialize writers with BEGIN IMMEDIATE instead."""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


engine = create_engine(settings.database_url)
if "pytest" in sys.modules:
    # point the shared engine at the throwaway testing database
    engine = create_engine(settings.test_database_url)


async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


@contextlib.asynccontextmanager
async def async_session_manager(
    auto_commit=True, session_overwrite: AsyncSession | None = None
) -> AsyncIterator[AsyncSession]:
    if session_overwrite:
        yield session_overwrite
    else:
        async with async_session_maker() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                raise e
            else:
                if auto_commit:
                    await session.commit()
