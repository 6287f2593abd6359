from __future__ import annotations

import json
import logging
from enum import Enum
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, Mapping, Optional, Protocol


log = logging.getLogger(__name__)

COMPONENTS_DIR = "components"
FALLBACK_RESOURCE = "fallback-zh-sg.json"


class Region(str, Enum):
    MY = "MY"
    SG = "SG"

    @property
    def other(self) -> "Region":
        return Region.SG if self is Region.MY else Region.MY

    @classmethod
    def parse(cls, value: Any) -> Optional["Region"]:
        """Return the region for an exact ``"MY"``/``"SG"`` value, else None."""
        if isinstance(value, Region):
            return value
        if isinstance(value, str) and value in cls._value2member_map_:
            return cls(value)
        return None


TRANSLATION_FILES: Dict[Region, str] = {
    Region.SG: "i18n-zh-sg.json",
    Region.MY: "i18n-zh-my.json",
}

PAGE_TITLES: Dict[Region, str] = {
    Region.SG: "自介 (华文，新加坡)",
    Region.MY: "自介 (华文，马来西亚)",
}


class TranslationSource(Protocol):
    async def fetch_json(self, path: str) -> Any:
        """Fetch and decode the JSON resource at a site-relative path."""
        ...


class TranslationLoadError(Exception):
    pass


def translation_path(region: Region) -> str:
    return f"{COMPONENTS_DIR}/{TRANSLATION_FILES[region]}"


def page_title(region: Region) -> str:
    return PAGE_TITLES[region]


@lru_cache(maxsize=1)
def _fallback() -> Dict[str, str]:
    text = resources.files("intro.locales").joinpath(FALLBACK_RESOURCE).read_text(encoding="utf-8")
    return json.loads(text)


def fallback_translations() -> Dict[str, str]:
    # Copy so callers never mutate the cached table
    return dict(_fallback())


def validate_dictionary(data: Any) -> Dict[str, str]:
    if not isinstance(data, dict):
        raise TranslationLoadError(f"expected a JSON object, got {type(data).__name__}")
    return {str(k): v for k, v in data.items() if isinstance(v, str)}


async def load_translations(source: TranslationSource, region: Region) -> Dict[str, str]:
    """Fetch the dictionary for ``region``; fall back to the built-in one on any failure."""
    path = translation_path(region)
    try:
        data = await source.fetch_json(path)
        return validate_dictionary(data)
    except Exception as e:
        log.error("Failed to load translations %s: %s", path, e)
        if region is not Region.SG:
            log.warning("Falling back to SG strings for region %s", region.value)
        return fallback_translations()


def lookup(translations: Optional[Mapping[str, str]], key: str | None) -> Optional[str]:
    """Return the display string for ``key``; empty or missing entries give None."""
    if not translations or not key:
        return None
    return translations.get(key) or None
