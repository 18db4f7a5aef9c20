"""
In-memory tweet collection backing one view.
"""

import logging
from typing import Dict, Any, List, Optional
from models import SavedTweet
from render_cache import RenderCache

logger = logging.getLogger(__name__)


class ItemStore:
    """Authoritative collection; structural changes clear the render cache."""

    def __init__(self, cache: RenderCache):
        self.cache = cache
        self._tweets: List[SavedTweet] = []

    def set_all(self, tweets: List[SavedTweet]) -> None:
        self._tweets = list(tweets)
        self.cache.clear()
        logger.debug(f"Item store replaced: {len(self._tweets)} tweets")

    def get_all(self) -> List[SavedTweet]:
        return self._tweets

    def find(self, item_id: str) -> Optional[SavedTweet]:
        for tweet in self._tweets:
            if tweet.item_id == item_id:
                return tweet
        return None

    def append(self, tweet: SavedTweet) -> bool:
        """Add a newly saved tweet at the front. Returns False for a known id."""
        if self.find(tweet.item_id) is not None:
            return False
        self._tweets.insert(0, tweet)
        return True

    def remove(self, item_id: str) -> bool:
        for index, tweet in enumerate(self._tweets):
            if tweet.item_id == item_id:
                del self._tweets[index]
                self.cache.clear()
                return True
        return False

    def update_fields(self, item_id: str, changes: Dict[str, Any]) -> Optional[SavedTweet]:
        """Write already validated field changes into the stored tweet."""
        tweet = self.find(item_id)
        if tweet is None:
            return None
        for key, value in changes.items():
            setattr(tweet, key, list(value) if key == "tags" else value)
        return tweet

    def __len__(self) -> int:
        return len(self._tweets)
