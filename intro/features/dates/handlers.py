from __future__ import annotations

import logging

from ...core.dates import convert_date, decorate
from ...infra.document import Document, Event

log = logging.getLogger(__name__)

DATE_ATTRIBUTE = "data-date"


def convert_page_dates(document: Document) -> int:
    """Rewrite every ``[data-date]`` element whose date parses; return how many changed."""
    converted = 0
    for el in document.find_all_with_attribute(DATE_ATTRIBUTE):
        text = convert_date(el.get_attribute(DATE_ATTRIBUTE))
        if text:
            el.text_content = decorate(text)
            converted += 1
    return converted


async def on_document_ready(event: Event) -> None:
    document = event.target
    assert isinstance(document, Document)
    count = convert_page_dates(document)
    log.debug("Converted %d date element(s)", count)
