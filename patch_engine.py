"""
Patch Engine
Applies a status change to a card that is already on screen, leaving the
rest of the frame and the other cache entries alone.
"""

import logging
from typing import Any, Callable, Dict, Optional
from errors import ValidationError
from models import RenderedItem, STATUSES
from render_cache import RenderCache
from view_renderer import status_presentation, toggle_presentation

PATCHABLE_FIELDS = frozenset({"status"})

logger = logging.getLogger(__name__)


class PatchEngine:
    def __init__(
        self,
        cache: RenderCache,
        find_visible: Callable[[str], Optional[RenderedItem]],
    ):
        self.cache = cache
        self.find_visible = find_visible

    def patch(self, item_id: str, changes: Dict[str, Any]) -> bool:
        """
        Patch the on-screen card for ``item_id``.

        Returns False when the card is not in the current frame or the change
        touches fields other than status; the caller then re-filters.
        """
        if not changes or not set(changes) <= PATCHABLE_FIELDS:
            return False
        status = changes["status"]
        if status not in STATUSES:
            raise ValidationError(f"Unknown status: {status!r}")

        rendered = self.find_visible(item_id)
        if rendered is None:
            logger.debug(f"No card on screen for {item_id}, patch skipped")
            return False

        apply_status(rendered, status)
        # The placed card stays valid; the next full build starts fresh
        self.cache.invalidate(item_id)
        return True


def apply_status(rendered: RenderedItem, status: str) -> None:
    rendered.status = status
    rendered.card_class, rendered.badge_class, rendered.badge_label = status_presentation(status)
    toggle = rendered.find_action("toggle")
    if toggle is not None:
        toggle.label, toggle.title, toggle.intent = toggle_presentation(status)
