from __future__ import annotations

import asyncio
import logging
import weakref
from typing import Dict, Optional

from ...core.i18n import Region, TranslationSource, load_translations, lookup, page_title
from ...infra.document import Document, Element, Event
from ...infra.preference_repo import PreferenceStore

log = logging.getLogger(__name__)

STORAGE_KEY = "region"
TOGGLE_ID = "region-toggle"
I18N_ATTRIBUTE = "data-i18n"
ARIA_LABEL = "区域切换：马来西亚/新加坡"
ACTIVATION_KEYS = ("Enter", " ")

# Control button -> the toggle wired to it
_owners: "weakref.WeakKeyDictionary[Element, RegionToggle]" = weakref.WeakKeyDictionary()


class RegionToggle:
    """MY/SG switch that swaps the page's translated strings.

    Owns the current region. The preference store and the translation source
    are passed in so the widget runs without a real database or network.
    """

    def __init__(
        self,
        document: Document,
        region: Region,
        store: PreferenceStore,
        source: TranslationSource,
    ) -> None:
        self.document = document
        self.region = region
        self.store = store
        self.source = source
        self.translations: Optional[Dict[str, str]] = None
        self.toggle_button: Optional[Element] = None
        self.toggle_slider: Optional[Element] = None
        self._load_task: Optional[asyncio.Task] = None

    @classmethod
    async def create(
        cls,
        document: Document,
        store: PreferenceStore,
        source: TranslationSource,
        default: Region = Region.SG,
    ) -> "RegionToggle":
        saved = await cls.get_saved_region(store)
        return cls(document, saved or default, store, source)

    async def initialize(self) -> None:
        if not self.create_toggle_element():
            log.warning("Region toggle control is already wired to another toggle; skipping")
            return
        self.setup_event_listeners()
        self.update_toggle_state()
        await self._reload()

    # Persistence

    @staticmethod
    async def get_saved_region(store: PreferenceStore) -> Optional[Region]:
        try:
            value = await store.get(STORAGE_KEY)
        except Exception as e:
            log.error("Failed to get saved region: %s", e)
            return None
        region = Region.parse(value)
        if value is not None and region is None:
            log.warning("Ignoring invalid saved region %r", value)
        return region

    async def save_region(self, region: Region) -> None:
        try:
            await self.store.set(STORAGE_KEY, region.value)
        except Exception as e:
            log.error("Failed to save region: %s", e)

    # Translations

    async def load_translations(self) -> Dict[str, str]:
        self.translations = await load_translations(self.source, self.region)
        return self.translations

    def apply_translations(self) -> int:
        if self.translations is None:
            return 0
        applied = 0
        for el in self.document.find_all_with_attribute(I18N_ATTRIBUTE):
            text = lookup(self.translations, el.get_attribute(I18N_ATTRIBUTE))
            if text is not None:
                el.text_content = text
                applied += 1
        self.document.title = page_title(self.region)
        return applied

    async def _load_and_apply(self) -> None:
        await self.load_translations()
        count = self.apply_translations()
        log.info("Applied %d %s translation(s)", count, self.region.value)

    async def _reload(self) -> None:
        # A newer reload cancels the one still in flight
        previous = self._load_task
        if previous is not None and not previous.done():
            previous.cancel()
        task = asyncio.create_task(self._load_and_apply())
        self._load_task = task
        try:
            await task
        except asyncio.CancelledError:
            if task.cancelled() and self._load_task is not task:
                log.debug("Superseded translation load dropped")
                return
            raise

    # Control

    def create_toggle_element(self) -> bool:
        """Build or adopt the control. False when another toggle already owns it."""
        container = self.document.get_element_by_id(TOGGLE_ID)
        if container is not None:
            button = container.find_by_class("toggle-container")
            slider = container.find_by_class("toggle-slider")
            if button is not None and slider is not None:
                owner = _owners.get(button)
                if owner is not None and owner is not self:
                    return False
                self.toggle_button, self.toggle_slider = button, slider
                return True
            container.text_content = ""
        else:
            container = self.document.create_element("div", id=TOGGLE_ID, class_="region-toggle")
            self.document.body.append_child(container)

        doc = self.document
        button = doc.create_element("div", class_="toggle-container")
        slider = doc.create_element("div", class_="toggle-slider")
        slider.text_content = self.region.value

        labels = doc.create_element("div", class_="region-labels")
        labels.append_child(doc.create_element("span", class_="region-label malaysia"))
        labels.append_child(doc.create_element("span", class_="region-label singapore"))

        button.append_child(slider)
        button.append_child(labels)
        container.append_child(button)

        self.toggle_button = button
        self.toggle_slider = slider
        return True

    def setup_event_listeners(self) -> None:
        button = self.toggle_button
        assert button is not None, "Toggle element not created"
        _owners[button] = self
        button.add_event_listener("click", self._on_click)
        button.add_event_listener("keydown", self._on_keydown)
        button.set_attribute("tabindex", "0")
        button.set_attribute("role", "switch")
        button.set_attribute("aria-label", ARIA_LABEL)
        button.set_attribute("aria-checked", self.region is Region.SG)

    async def _on_click(self, event: Event) -> None:
        await self.toggle_region()

    async def _on_keydown(self, event: Event) -> None:
        if event.key in ACTIVATION_KEYS:
            event.prevent_default()
            await self.toggle_region()

    def update_toggle_state(self) -> None:
        button, slider = self.toggle_button, self.toggle_slider
        assert button is not None and slider is not None, "Toggle element not created"
        if self.region is Region.SG:
            button.add_class("active")
        else:
            button.remove_class("active")
        slider.text_content = self.region.value
        button.set_attribute("aria-checked", self.region is Region.SG)

    async def toggle_region(self) -> Region:
        self.region = self.region.other
        self.update_toggle_state()
        await self.save_region(self.region)
        await self._reload()
        return self.region


async def on_document_ready(
    event: Event,
    store: PreferenceStore,
    source: TranslationSource,
    default: Region = Region.SG,
) -> None:
    document = event.target
    assert isinstance(document, Document)
    toggle = await RegionToggle.create(document, store, source, default)
    await toggle.initialize()
