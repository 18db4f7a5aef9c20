#!/usr/bin/env python3
"""
List View Engine
One instance per view (library or read-only mirror). Owns the tweet
collection, the render cache, the scroll window, and the input timers.
"""

import logging
import time
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Union
from data_parser import parse_criteria, validate_updates
from errors import ValidationError
from filter_engine import FilterSortEngine, collect_tags, last_updated_label, matches, stats_label
from item_store import ItemStore
from models import RenderedView, SavedTweet, ViewCriteria, ViewState
from patch_engine import PATCHABLE_FIELDS, PatchEngine
from render_cache import RenderCache
from scheduling import Debouncer, Throttler
from settings import ViewConfig
from view_renderer import ViewRenderer
from window_calculator import WindowTracker, compute_window

logger = logging.getLogger(__name__)

# init() option names used by the page scripts
_INIT_OPTIONS = {
    "mode": "flavor",
    "emptyStatePlaceholder": "empty_placeholder",
    "errorStatePlaceholder": "error_placeholder",
    "virtualizationThreshold": "virtualization_threshold",
    "itemHeight": "item_height",
    "bufferSize": "buffer_size",
}


class ListViewEngine:
    def __init__(
        self,
        config: Optional[ViewConfig] = None,
        container: Optional[Callable[[RenderedView], Any]] = None,
        call_later: Optional[Callable] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or ViewConfig()
        self.flavor = self.config.flavor
        self.container = container
        self.cache = RenderCache()
        self.store = ItemStore(self.cache)
        self.filter_engine = FilterSortEngine(self.cache)
        self.window = WindowTracker(self.config.item_height, self.config.buffer_size)
        self.renderer = ViewRenderer(self.cache, self.config)
        self.patcher = PatchEngine(self.cache, self.renderer.find_visible)
        self.criteria = ViewCriteria()
        self.state = ViewState()
        self.scroll_offset = 0.0
        self.viewport_height = float(self.config.viewport_height)
        self.render_count = 0
        self.last_view: Optional[RenderedView] = None
        self._search = Debouncer(self.config.search_debounce, self._commit_search, call_later)
        self._scroll = Throttler(self.config.scroll_throttle, self._apply_scroll, clock)

    @classmethod
    def init(cls, options: Optional[Dict[str, Any]] = None, **kwargs) -> "ListViewEngine":
        """Build an engine from page-script style options (camelCase keys)."""
        options = dict(options or {})
        container = options.pop("container", None)
        config_kwargs = {}
        for key, value in options.items():
            if key not in _INIT_OPTIONS:
                raise ValidationError(f"Unknown view option: {key}")
            config_kwargs[_INIT_OPTIONS[key]] = value
        return cls(ViewConfig(**config_kwargs), container=container, **kwargs)

    # Collection ----------------------------------------------------------

    def set_all(self, tweets: List[SavedTweet]) -> None:
        self.store.set_all(tweets)
        self._refilter()

    def get_all(self) -> List[SavedTweet]:
        return self.store.get_all()

    def get_filtered_view(self) -> List[SavedTweet]:
        return self.state.ordered_view

    def add_item(self, tweet: SavedTweet) -> bool:
        if not self.store.append(tweet):
            return False
        self._refilter()
        self.render()
        return True

    def remove_item(self, item_id: str) -> bool:
        if not self.store.remove(item_id):
            return False
        self._refilter()
        self.render()
        return True

    def update_item(self, item_id: str, changes: Dict[str, Any]) -> bool:
        """
        Write field changes and refresh the view.
        A status-only change that keeps the tweet's place in the view is
        patched in place; anything else re-filters and re-renders.
        Returns False when the tweet is unknown.
        """
        changes = validate_updates(changes)
        tweet = self.store.find(item_id)
        if tweet is None:
            return False
        was_included = matches(tweet, self.criteria)
        self.store.update_fields(item_id, changes)

        status_only = bool(changes) and set(changes) <= PATCHABLE_FIELDS
        if status_only and was_included and matches(tweet, self.criteria):
            if self.patcher.patch(item_id, changes):
                logger.debug(f"Patched {item_id} in place")
                return True

        self._refilter()
        self.render()
        return True

    def available_tags(self) -> List[str]:
        return collect_tags(self.store.get_all())

    def stats_label(self) -> str:
        return stats_label(self.store.get_all())

    def last_updated_label(self) -> Optional[str]:
        return last_updated_label(self.store.get_all())

    # Criteria ------------------------------------------------------------

    def apply_criteria(self, criteria: Union[ViewCriteria, Dict[str, Any]]) -> List[SavedTweet]:
        if isinstance(criteria, dict):
            criteria = parse_criteria(criteria)
        elif not isinstance(criteria, ViewCriteria):
            raise ValidationError(f"Expected ViewCriteria, got {type(criteria).__name__}")
        self.criteria = criteria
        self._refilter()
        return self.state.ordered_view

    def on_search_input(self, term: str) -> None:
        """Debounced on the running event loop: only the last term within the
        quiet period re-filters. Without a running loop the search applies at once.
        """
        self._search(term)

    def flush_search(self) -> bool:
        return self._search.flush()

    def _commit_search(self, term: str) -> None:
        self.apply_criteria(replace(self.criteria, search_term=term))
        self.render()

    def _refilter(self) -> None:
        ordered = self.filter_engine.apply(self.store.get_all(), self.criteria)
        self.renderer.forget_frame()
        self.state = ViewState(
            ordered_view=ordered,
            virtualized=len(ordered) > self.config.virtualization_threshold,
        )
        self.window.reset()
        if self.state.virtualized:
            self._sync_window()

    # Scrolling -----------------------------------------------------------

    def on_scroll(self, scroll_offset: float, viewport_height: Optional[float] = None) -> bool:
        """Throttled scroll handler. Returns False when the event was dropped."""
        return self._scroll(scroll_offset, viewport_height)

    def set_geometry(self, scroll_offset: float, viewport_height: Optional[float] = None) -> None:
        """Record scroll position and viewport size without rendering."""
        self.scroll_offset = scroll_offset
        if viewport_height is not None:
            self.viewport_height = viewport_height

    def _apply_scroll(self, scroll_offset: float, viewport_height: Optional[float]) -> None:
        self.set_geometry(scroll_offset, viewport_height)
        if not self.state.virtualized:
            return
        bounds = self.window.update(len(self.state.ordered_view), self.scroll_offset, self.viewport_height)
        if bounds is None:
            return
        self.state.window_start, self.state.window_end = bounds
        self._paint()

    def _sync_window(self) -> None:
        bounds = compute_window(
            len(self.state.ordered_view),
            self.config.item_height,
            self.config.buffer_size,
            self.scroll_offset,
            self.viewport_height,
        )
        self.window.bounds = bounds
        self.state.window_start, self.state.window_end = bounds

    # Rendering -----------------------------------------------------------

    def render(self) -> RenderedView:
        if self.state.virtualized:
            self._sync_window()
        return self._paint()

    def show_error(self, message: Optional[str] = None) -> RenderedView:
        logger.error(f"Showing error state: {message}")
        view = self.renderer.render_error(message)
        return self._publish(view)

    def patch(self, item_id: str, changes: Dict[str, Any]) -> bool:
        """Presentation-only patch of an on-screen card."""
        return self.patcher.patch(item_id, changes)

    def _paint(self) -> RenderedView:
        view = self.renderer.render(len(self.store), self.state)
        return self._publish(view)

    def _publish(self, view: RenderedView) -> RenderedView:
        self.render_count += 1
        self.last_view = view
        if self.container is not None:
            self.container(view)
        return view
