"""
Identity-keyed cache of rendered tweet cards.
Entries are created lazily by the view renderer and dropped on invalidation.
"""

import logging
from typing import Dict, Optional
from models import RenderedItem

logger = logging.getLogger(__name__)


class RenderCache:
    def __init__(self):
        self._entries: Dict[str, RenderedItem] = {}
        self.hits = 0
        self.misses = 0

    def get(self, item_id: str) -> Optional[RenderedItem]:
        rendered = self._entries.get(item_id)
        if rendered is None:
            self.misses += 1
        else:
            self.hits += 1
        return rendered

    def put(self, item_id: str, rendered: RenderedItem) -> None:
        self._entries[item_id] = rendered

    def invalidate(self, item_id: str) -> bool:
        """Drop one entry. Returns whether anything was cached for it."""
        return self._entries.pop(item_id, None) is not None

    def clear(self) -> None:
        if self._entries:
            logger.debug(f"Clearing render cache ({len(self._entries)} entries)")
        self._entries.clear()

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
