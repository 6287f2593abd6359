from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession


engine: Optional[AsyncEngine] = None
SessionLocal: Optional[async_sessionmaker[AsyncSession]] = None


async def init_engine(dsn: str) -> None:
    global engine
    if engine is None:
        engine = create_async_engine(dsn, future=True, echo=False)


def init_sessionmaker() -> None:
    global SessionLocal
    if SessionLocal is None:
        assert engine is not None, "Engine not initialized"
        SessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def set_sqlite_pragmas(target: Optional[AsyncEngine] = None) -> None:
    target = target or engine
    assert target is not None
    if not target.url.database or target.url.database == ":memory:":
        return
    async with target.begin() as conn:  # type: ignore
        await conn.exec_driver_sql("PRAGMA journal_mode=WAL;")


async def dispose_engine() -> None:
    global engine, SessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    SessionLocal = None
