from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import httpx

log = logging.getLogger(__name__)


class HttpTranslationSource:
    """Fetches dictionaries relative to the client's ``base_url``."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def fetch_json(self, path: str) -> Any:
        response = await self.client.get(path)
        response.raise_for_status()
        return response.json()


class FileTranslationSource:
    """Reads dictionaries from a site directory on disk."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    async def fetch_json(self, path: str) -> Any:
        target = self.root / path
        log.debug("Reading translations from %s", target)
        text = await asyncio.to_thread(target.read_text, encoding="utf-8")
        return json.loads(text)
