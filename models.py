from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any

STATUS_UNREAD = "unread"
STATUS_ARCHIVED = "archived"
STATUSES = (STATUS_UNREAD, STATUS_ARCHIVED)

FILTER_ALL = "all"
SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_ORDERS = (SORT_NEWEST, SORT_OLDEST)

DISPLAY_EMPTY = "empty"
DISPLAY_NO_MATCH = "no_match"
DISPLAY_POPULATED = "populated"
DISPLAY_ERROR = "error"

LAYOUT_NONE = "none"
LAYOUT_FULL = "full"
LAYOUT_VIRTUAL = "virtual"


class ViewFlavor(Enum):
    INTERACTIVE = "full"
    READ_ONLY = "readonly"

    @property
    def allows_edits(self) -> bool:
        return self is ViewFlavor.INTERACTIVE


@dataclass
class SavedTweet:
    item_id: str
    url: str = ""
    author: str = ""
    text: str = ""
    saved_at: str = ""  # ISO 8601 string
    tags: List[str] = field(default_factory=list)
    note: str = ""
    status: str = STATUS_UNREAD

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the extension's on-disk keys."""
        return {
            "tweetId": self.item_id,
            "url": self.url,
            "author": self.author,
            "text": self.text,
            "savedAt": self.saved_at,
            "tags": list(self.tags),
            "note": self.note,
            "status": self.status,
        }


@dataclass(frozen=True)
class ViewCriteria:
    search_term: str = ""
    status_filter: str = FILTER_ALL
    tag_filter: str = FILTER_ALL
    sort_order: str = SORT_NEWEST


@dataclass
class ActionButton:
    action: str
    label: str
    title: str
    css_class: str
    intent: Optional[str] = None
    href: Optional[str] = None  # set for link-style actions


@dataclass
class RenderedItem:
    """Cached presentation of one tweet card.

    The HTML fragments are already escaped. Only the status-related fields
    change after construction, and only through the patch engine.
    """

    item_id: str
    status: str
    card_class: str
    badge_class: str
    badge_label: str
    author_html: str
    date_label: str
    body_html: str
    actions: List[ActionButton] = field(default_factory=list)

    def find_action(self, action: str) -> Optional[ActionButton]:
        for button in self.actions:
            if button.action == action:
                return button
        return None


@dataclass
class PlacedItem:
    index: int
    rendered: RenderedItem
    top: Optional[int] = None  # None in full-list layout


@dataclass
class ViewState:
    ordered_view: List[SavedTweet] = field(default_factory=list)
    window_start: int = 0
    window_end: int = 0
    virtualized: bool = False


@dataclass
class RenderedView:
    display_state: str
    layout: str = LAYOUT_NONE
    items: List[PlacedItem] = field(default_factory=list)
    container_height: Optional[int] = None
    placeholder: Optional[str] = None
    showing_label: str = ""

    @property
    def item_ids(self) -> List[str]:
        return [placed.rendered.item_id for placed in self.items]
