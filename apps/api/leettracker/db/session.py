from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from leettracker.core.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine; SQLite connections get foreign keys switched on so
    the ``ON DELETE CASCADE`` clauses are honoured.
    """

    async_engine = create_async_engine(database_url, echo=echo, future=True)
    if make_url(database_url).get_backend_name() == "sqlite":
        event.listen(async_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return async_engine


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine: AsyncEngine = build_engine(settings.database_url, echo=settings.sqlalchemy_echo)

SessionLocal = build_sessionmaker(engine)


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    session = SessionLocal()
    try:
        yield session
    finally:
        await session.close()
