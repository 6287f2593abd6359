from __future__ import annotations

from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from . import db
from .models import Preference


class PreferenceStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...


class PreferenceRepo:
    def __init__(self, session: AsyncSession) -> None:
        self.s = session

    async def get(self, key: str) -> Optional[str]:
        q = select(Preference).where(Preference.key == key)
        row = (await self.s.execute(q)).scalars().first()
        return row.value if row else None

    async def set(self, key: str, value: str) -> None:
        row = await self.s.get(Preference, key)
        if row is None:
            self.s.add(Preference(key=key, value=value))
        else:
            row.value = value


class SqlPreferenceStore:
    """Key-value preference store backed by one short session per call."""

    def __init__(self, sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None) -> None:
        self._sessionmaker = sessionmaker

    @property
    def sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        maker = self._sessionmaker or db.SessionLocal
        assert maker is not None, "Sessionmaker not initialized"
        return maker

    async def get(self, key: str) -> Optional[str]:
        async with self.sessionmaker() as s:
            return await PreferenceRepo(s).get(key)

    async def set(self, key: str, value: str) -> None:
        async with self.sessionmaker() as s:
            await PreferenceRepo(s).set(key, value)
            await s.commit()
