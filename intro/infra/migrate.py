from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from . import db
from .models import Base

log = logging.getLogger(__name__)


async def migrate(engine: Optional[AsyncEngine] = None) -> None:
    engine = engine or db.engine
    assert engine is not None, "Engine not initialized"
    async with engine.begin() as conn:  # type: ignore
        await conn.run_sync(Base.metadata.create_all)
    await db.set_sqlite_pragmas(engine)
    log.debug("Preference schema ready on %s", engine.url.render_as_string(hide_password=True))
