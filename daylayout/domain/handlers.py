"""Store-change handlers, wired up at application startup."""

from __future__ import annotations

from loguru import logger

from daylayout.domain.bus import EventBus
from daylayout.domain.events import StoreChange
from daylayout.repos.memory import LayoutCache


class HandlerRegistry:
    """Wires store-change handlers to the bus with access to the layout cache."""

    def __init__(self, bus: EventBus, layout_cache: LayoutCache) -> None:
        self.bus = bus
        self.layout_cache = layout_cache
        self._register()

    def _register(self) -> None:
        self.bus.subscribe_all(self.on_store_changed)

    def on_store_changed(self, change: StoreChange) -> None:
        if len(self.layout_cache):
            logger.debug(
                "{} (v{}): dropping {} cached layouts",
                type(change).__name__,
                change.version,
                len(self.layout_cache),
            )
        self.layout_cache.clear()
