from __future__ import annotations

import argparse
import asyncio
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional

import httpx
from sqlalchemy.engine import make_url

from .core.config import settings
from .core.i18n import Region, TranslationSource
from .core.logging_config import setup_logging
from .features.dates import register as register_dates
from .features.region_toggle import register as register_region_toggle
from .features.region_toggle.handlers import TOGGLE_ID
from .infra import db
from .infra.document import Document, Event
from .infra.migrate import migrate
from .infra.preference_repo import SqlPreferenceStore
from .infra.sources import FileTranslationSource, HttpTranslationSource

log = logging.getLogger(__name__)


def ensure_sqlite_dir(dsn: str) -> None:
    url = make_url(dsn)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


@asynccontextmanager
async def open_translation_source(site_root: Path) -> AsyncIterator[TranslationSource]:
    if settings.TRANSLATIONS_BASE_URL:
        async with httpx.AsyncClient(
            base_url=settings.TRANSLATIONS_BASE_URL,
            timeout=settings.HTTP_TIMEOUT,
        ) as client:
            yield HttpTranslationSource(client)
    else:
        yield FileTranslationSource(site_root)


async def click_toggle(document: Document, times: int) -> None:
    container = document.get_element_by_id(TOGGLE_ID)
    button = container.find_by_class("toggle-container") if container is not None else None
    if button is None:
        log.warning("No region toggle on page; skipping %d click(s)", times)
        return
    for _ in range(times):
        await button.dispatch_event(Event("click"))


async def enhance(
    input_path: Path,
    output_path: Path,
    toggles: int = 0,
    database_url: Optional[str] = None,
) -> Document:
    """Load a page, run both features on document-ready, and write the result."""
    dsn = database_url or settings.DATABASE_URL
    ensure_sqlite_dir(dsn)
    await db.init_engine(dsn)
    db.init_sessionmaker()
    try:
        await migrate()
        document = Document.from_path(input_path)
        site_root = settings.SITE_ROOT or input_path.parent
        async with open_translation_source(site_root) as source:
            register_dates(document)
            register_region_toggle(
                document,
                SqlPreferenceStore(),
                source,
                default_region=Region(settings.DEFAULT_REGION),
            )
            await document.fire_ready()
            if toggles:
                await click_toggle(document, toggles)
        document.write(output_path)
        log.info("Wrote %s (title: %s)", output_path, document.title)
        return document
    finally:
        await db.dispose_engine()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intro-page",
        description="Reformat dates and apply the MY/SG region strings to a self-introduction page.",
    )
    parser.add_argument("input", type=Path, help="HTML page to enhance")
    parser.add_argument("-o", "--output", type=Path, help="where to write the page (default: overwrite input)")
    parser.add_argument("--toggle", type=int, default=0, metavar="N", help="click the region toggle N times")
    parser.add_argument("--database-url", help="override DATABASE_URL")
    parser.add_argument("--debug", action="store_true", help="verbose console logging")
    parser.add_argument("--no-log-file", action="store_true", help="do not write logs/intro_*.log")
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.input.is_file():
        parser.error(f"input page not found: {args.input}")
    if args.toggle < 0:
        parser.error("--toggle must not be negative")

    debug_mode = args.debug or os.getenv("DEBUG", "").lower() in ("1", "true", "yes")
    setup_logging(log_file=not args.no_log_file, debug=debug_mode)

    asyncio.run(enhance(args.input, args.output or args.input, args.toggle, args.database_url))
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
