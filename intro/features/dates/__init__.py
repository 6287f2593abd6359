from __future__ import annotations

from ...infra.document import Document

from .handlers import on_document_ready


def register(document: Document) -> None:
    document.on_ready(on_document_ready)
