"""
Filter/Sort Engine
Turns the collection plus the active criteria into the ordered view.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional
from data_parser import format_date, parse_saved_at
from models import (
    SavedTweet,
    ViewCriteria,
    FILTER_ALL,
    SORT_NEWEST,
    STATUS_UNREAD,
    STATUS_ARCHIVED,
)
from render_cache import RenderCache

# Unparseable timestamps sort as the oldest entries
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)

logger = logging.getLogger(__name__)


def searchable_text(tweet: SavedTweet) -> str:
    return " ".join([tweet.text, tweet.author, tweet.note, " ".join(tweet.tags)]).casefold()


def matches(tweet: SavedTweet, criteria: ViewCriteria) -> bool:
    """Inclusion test: status, tag, and search clauses must all pass."""
    if criteria.status_filter != FILTER_ALL and tweet.status != criteria.status_filter:
        return False
    if criteria.tag_filter != FILTER_ALL and criteria.tag_filter not in tweet.tags:
        return False
    term = criteria.search_term.strip().casefold()
    if term and term not in searchable_text(tweet):
        return False
    return True


def sort_key(tweet: SavedTweet) -> datetime:
    return parse_saved_at(tweet.saved_at) or _OLDEST


def filter_and_sort(tweets: List[SavedTweet], criteria: ViewCriteria) -> List[SavedTweet]:
    """
    Pure filter + sort. Never mutates ``tweets``; the sort is stable so equal
    timestamps keep collection order in both directions.
    """
    selected = [tweet for tweet in tweets if matches(tweet, criteria)]
    return sorted(selected, key=sort_key, reverse=criteria.sort_order == SORT_NEWEST)


class FilterSortEngine:
    """Wraps filter_and_sort; every pass clears the render cache."""

    def __init__(self, cache: RenderCache):
        self.cache = cache
        self.passes = 0

    def apply(self, tweets: List[SavedTweet], criteria: ViewCriteria) -> List[SavedTweet]:
        ordered = filter_and_sort(tweets, criteria)
        self.cache.clear()
        self.passes += 1
        logger.debug(f"Filter pass {self.passes}: {len(ordered)}/{len(tweets)} tweets match {criteria}")
        return ordered


def collect_tags(tweets: List[SavedTweet]) -> List[str]:
    tags = set()
    for tweet in tweets:
        tags.update(tweet.tags)
    return sorted(tags)


def count_by_status(tweets: List[SavedTweet]) -> Dict[str, int]:
    counts = {STATUS_UNREAD: 0, STATUS_ARCHIVED: 0}
    for tweet in tweets:
        if tweet.status in counts:
            counts[tweet.status] += 1
    return counts


def showing_label(count: int) -> str:
    return "Showing 1 tweet" if count == 1 else f"Showing {count} tweets"


def stats_label(tweets: List[SavedTweet]) -> str:
    counts = count_by_status(tweets)
    return f"({counts[STATUS_UNREAD]} unread, {counts[STATUS_ARCHIVED]} archived)"


def last_updated_label(tweets: List[SavedTweet]) -> Optional[str]:
    """Label for the newest valid savedAt; None when no date parses."""
    dates = [dt for dt in (parse_saved_at(tweet.saved_at) for tweet in tweets) if dt is not None]
    if not dates:
        return None
    return f"Last updated: {format_date(max(dates))}"
