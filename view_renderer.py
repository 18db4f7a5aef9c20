"""
View Renderer
Materializes the ordered view as tweet cards, either the whole list or only
the scroll window, reusing cached cards where possible.
"""

import logging
from html import escape
from typing import Callable, Dict, List, Optional, Tuple
from data_parser import format_saved_date
from errors import RenderFault
from filter_engine import showing_label
from models import (
    ActionButton,
    PlacedItem,
    RenderedItem,
    RenderedView,
    SavedTweet,
    ViewFlavor,
    ViewState,
    STATUS_ARCHIVED,
    STATUS_UNREAD,
    DISPLAY_EMPTY,
    DISPLAY_ERROR,
    DISPLAY_NO_MATCH,
    DISPLAY_POPULATED,
    LAYOUT_FULL,
    LAYOUT_VIRTUAL,
)
from render_cache import RenderCache
from settings import ViewConfig

logger = logging.getLogger(__name__)


def status_presentation(status: str) -> Tuple[str, str, str]:
    """Card class, badge class, and badge label for a status."""
    archived = status == STATUS_ARCHIVED
    card_class = "tweet-card archived" if archived else "tweet-card"
    return card_class, f"status-badge {status}", "Archived" if archived else "Unread"


def toggle_presentation(status: str) -> Tuple[str, str, str]:
    """Label, title, and intent of the archive toggle for a status."""
    if status == STATUS_ARCHIVED:
        return "Unread", "Mark Unread", STATUS_UNREAD
    return "Archive", "Archive", STATUS_ARCHIVED


def interactive_actions(tweet: SavedTweet) -> List[ActionButton]:
    label, title, intent = toggle_presentation(tweet.status)
    return [
        ActionButton("open", "Open", "Open Tweet", "action-btn open-btn"),
        ActionButton("edit", "Edit", "Edit", "action-btn edit-btn"),
        ActionButton("toggle", label, title, "action-btn toggle-btn", intent=intent),
        ActionButton("delete", "Delete", "Delete", "action-btn delete-btn"),
    ]


def read_only_actions(tweet: SavedTweet) -> List[ActionButton]:
    url = tweet.url or f"https://x.com/i/status/{tweet.item_id}"
    return [ActionButton("open", "Open Tweet", "Open Tweet", "action-btn open-btn", href=url)]


ACTION_BUILDERS: Dict[ViewFlavor, Callable[[SavedTweet], List[ActionButton]]] = {
    ViewFlavor.INTERACTIVE: interactive_actions,
    ViewFlavor.READ_ONLY: read_only_actions,
}


def build_rendered_item(
    tweet: SavedTweet, build_actions: Callable[[SavedTweet], List[ActionButton]]
) -> RenderedItem:
    """Build a fresh card. All user supplied text is escaped here."""
    card_class, badge_class, badge_label = status_presentation(tweet.status)
    author = escape(tweet.author or "unknown")
    author_html = (
        f'<a href="https://x.com/{author}" target="_blank" rel="noopener noreferrer">@{author}</a>'
    )

    parts = [f'<div class="tweet-text">{escape(tweet.text) or "<em>No text content</em>"}</div>']
    if tweet.tags:
        spans = "".join(f'<span class="tag">{escape(tag)}</span>' for tag in tweet.tags)
        parts.append(f'<div class="tweet-tags">{spans}</div>')
    if tweet.note:
        parts.append(f'<div class="tweet-note"><strong>Note:</strong> {escape(tweet.note)}</div>')

    return RenderedItem(
        item_id=tweet.item_id,
        status=tweet.status,
        card_class=card_class,
        badge_class=badge_class,
        badge_label=badge_label,
        author_html=author_html,
        date_label=escape(format_saved_date(tweet.saved_at)),
        body_html="".join(parts),
        actions=build_actions(tweet),
    )


def action_html(button: ActionButton) -> str:
    if button.href is not None:
        return (
            f'<a href="{escape(button.href)}" target="_blank" rel="noopener noreferrer" '
            f'class="{button.css_class}">{escape(button.label)}</a>'
        )
    intent = f' data-intent="{button.intent}"' if button.intent else ""
    return (
        f'<button class="{button.css_class}" title="{escape(button.title)}" '
        f'data-action="{button.action}"{intent}>{escape(button.label)}</button>'
    )


def card_html(rendered: RenderedItem, top: Optional[int] = None) -> str:
    style = f' style="position: absolute; top: {top}px; left: 0; right: 0"' if top is not None else ""
    actions = "".join(action_html(button) for button in rendered.actions)
    return (
        f'<div class="{rendered.card_class}" data-tweet-id="{escape(rendered.item_id)}"{style}>'
        f'<div class="tweet-header"><div class="tweet-author">{rendered.author_html}'
        f'<span class="{rendered.badge_class}">{rendered.badge_label}</span></div>'
        f'<div class="tweet-date">{rendered.date_label}</div></div>'
        f"{rendered.body_html}"
        f'<div class="tweet-actions">{actions}</div></div>'
    )


def view_html(view: RenderedView) -> str:
    """Serialize a rendered frame into the tweets container markup."""
    if view.display_state == DISPLAY_NO_MATCH:
        return f'<div class="no-results">{escape(view.placeholder)}</div>'
    if view.display_state in (DISPLAY_EMPTY, DISPLAY_ERROR):
        return f'<div class="{view.display_state}-state">{escape(view.placeholder)}</div>'
    cards = "".join(card_html(placed.rendered, placed.top) for placed in view.items)
    if view.layout == LAYOUT_VIRTUAL:
        return (
            f'<div id="tweets-container" style="position: relative; '
            f'height: {view.container_height}px">{cards}</div>'
        )
    return f'<div id="tweets-container">{cards}</div>'


class ViewRenderer:
    def __init__(self, cache: RenderCache, config: ViewConfig):
        self.cache = cache
        self.config = config
        self._build_actions = ACTION_BUILDERS[config.flavor]
        self.visible: Dict[str, RenderedItem] = {}
        self.builds = 0

    def find_visible(self, item_id: str) -> Optional[RenderedItem]:
        """The card currently placed for ``item_id`` in the last frame, if any."""
        return self.visible.get(item_id)

    def forget_frame(self) -> None:
        """Drop the placed cards; nothing is patchable until the next render."""
        self.visible = {}

    def render(self, total_count: int, state: ViewState) -> RenderedView:
        """
        Materialize one frame.

        Args:
            total_count: Size of the whole collection (not just the ordered view)
            state: Ordered view plus window bounds

        Returns:
            RenderedView describing what the container shows
        """
        if total_count == 0:
            self.visible = {}
            return RenderedView(DISPLAY_EMPTY, placeholder=self.config.empty_placeholder)

        ordered = state.ordered_view
        if not ordered:
            self.visible = {}
            return RenderedView(
                DISPLAY_NO_MATCH,
                placeholder=self.config.no_results_placeholder,
                showing_label=showing_label(0),
            )

        if state.virtualized:
            placed = self._place_window(ordered, state.window_start, state.window_end)
            view = RenderedView(
                DISPLAY_POPULATED,
                layout=LAYOUT_VIRTUAL,
                items=placed,
                container_height=len(ordered) * self.config.item_height,
            )
        else:
            placed = [PlacedItem(index, self._materialize(tweet)) for index, tweet in enumerate(ordered)]
            view = RenderedView(DISPLAY_POPULATED, layout=LAYOUT_FULL, items=placed)

        view.showing_label = showing_label(len(ordered))
        self.visible = {p.rendered.item_id: p.rendered for p in placed}
        return view

    def render_error(self, message: Optional[str] = None) -> RenderedView:
        self.visible = {}
        placeholder = self.config.error_placeholder
        if message:
            placeholder = f"{placeholder}: {message}"
        return RenderedView(DISPLAY_ERROR, placeholder=placeholder)

    def _place_window(self, ordered: List[SavedTweet], start: int, end: int) -> List[PlacedItem]:
        total = len(ordered)
        if not 0 <= start <= end <= total:
            raise RenderFault(f"Window [{start}, {end}) outside ordered view of {total}")
        placed = []
        for index in range(start, end):
            rendered = self._materialize(ordered[index])
            placed.append(PlacedItem(index, rendered, top=index * self.config.item_height))
        return placed

    def _materialize(self, tweet: SavedTweet) -> RenderedItem:
        rendered = self.cache.get(tweet.item_id)
        if rendered is None:
            rendered = build_rendered_item(tweet, self._build_actions)
            self.cache.put(tweet.item_id, rendered)
            self.builds += 1
        return rendered
