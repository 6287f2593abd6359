from __future__ import annotations

from functools import partial

from ...core.i18n import Region, TranslationSource
from ...infra.document import Document
from ...infra.preference_repo import PreferenceStore

from .handlers import RegionToggle, on_document_ready

__all__ = ["RegionToggle", "register"]


def register(
    document: Document,
    store: PreferenceStore,
    source: TranslationSource,
    default_region: Region = Region.SG,
) -> None:
    document.on_ready(partial(on_document_ready, store=store, source=source, default=default_region))
