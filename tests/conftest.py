"""Shared fixtures for the page enhancer tests."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from intro.core.i18n import Region, translation_path
from intro.infra.document import Document
from intro.infra.migrate import migrate
from intro.infra.preference_repo import SqlPreferenceStore


SG_PATH = translation_path(Region.SG)
MY_PATH = translation_path(Region.MY)

SG_STRINGS = {"greeting": "Hi SG", "callMe": "叫我 SG", "blank": ""}
MY_STRINGS = {"greeting": "Hi MY", "callMe": "叫我 MY", "blank": ""}

PAGE = """<!DOCTYPE html>
<html lang="zh">
<head><meta charset="utf-8"><title>自介</title></head>
<body>
<h1 data-i18n="greeting">Hello</h1>
<p data-i18n="callMe">Call me</p>
<p data-i18n="unknownKey">Keep me</p>
<p data-i18n="blank">Not blank</p>
<span id="updated" data-date="2025.10.3">2025.10.3</span>
<span id="broken" data-date="not a date">not a date</span>
</body>
</html>
"""


class FakeSource:
    """Translation source serving canned payloads; paths in ``gates`` block until set."""

    def __init__(self, payloads: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None) -> None:
        self.payloads = payloads if payloads is not None else {SG_PATH: SG_STRINGS, MY_PATH: MY_STRINGS}
        self.error = error
        self.requested: List[str] = []
        self.gates: Dict[str, asyncio.Event] = {}

    async def fetch_json(self, path: str) -> Any:
        self.requested.append(path)
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()
        if self.error is not None:
            raise self.error
        if path not in self.payloads:
            raise FileNotFoundError(path)
        return self.payloads[path]


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value


class FailingStore:
    async def get(self, key: str) -> Optional[str]:
        raise OSError("storage unavailable")

    async def set(self, key: str, value: str) -> None:
        raise OSError("storage unavailable")


@pytest.fixture
def page() -> Document:
    return Document.parse(PAGE)


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def make_source():
    return FakeSource


@pytest.fixture
def make_store():
    return MemoryStore


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    """Preference store over a throwaway SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'prefs.db'}", future=True)
    await migrate(engine)
    yield SqlPreferenceStore(async_sessionmaker(engine, expire_on_commit=False))
    await engine.dispose()
