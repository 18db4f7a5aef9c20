#!/usr/bin/env python3
"""
Library Store
JSON-file backed persistence for saved tweets. Every operation reads the
file, applies one change, and writes it back when something changed.
"""

import os
import logging
from typing import Any, Callable, Dict, List
from data_parser import extract_tweet_id, normalize_tweet, validate_updates
from errors import ValidationError
from filter_engine import sort_key
from models import SavedTweet, STATUS_UNREAD
from storage import load_json, save_json

REASON_DUPLICATE = "duplicate"
REASON_NOT_FOUND = "not_found"
REASON_IO_ERROR = "io_error"

logger = logging.getLogger(__name__)


class LibraryStore:
    """Persistence collaborator for the library view."""

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> List[SavedTweet]:
        if not os.path.exists(self.path):
            return []
        data = load_json(self.path)
        if not isinstance(data, list):
            raise ValidationError(f"Library file {self.path} does not hold a tweet list")
        tweets = []
        for raw in data:
            if extract_tweet_id(raw) is None:
                logger.warning(f"Ignoring stored record without tweetId in {self.path}")
                continue
            tweets.append(normalize_tweet(raw))
        return tweets

    def _with_tweets(self, modifier: Callable[[List[SavedTweet]], Dict[str, Any]]) -> Dict[str, Any]:
        tweets = self._read()
        result = modifier(tweets)
        if result.pop("save", True):
            if not save_json([tweet.to_dict() for tweet in tweets], self.path):
                return {"success": False, "reason": REASON_IO_ERROR}
        return result

    def list_all(self) -> Dict[str, Any]:
        try:
            tweets = self._read()
        except ValidationError as e:
            return {"success": False, "error": str(e)}
        return {"success": True, "tweets": tweets}

    def save(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        tweet = normalize_tweet(raw)

        def modifier(tweets):
            if any(t.item_id == tweet.item_id for t in tweets):
                return {"success": False, "reason": REASON_DUPLICATE, "save": False}
            tweets.insert(0, tweet)
            return {"success": True, "tweet": tweet}

        result = self._with_tweets(modifier)
        if result["success"]:
            logger.info(f"✅ Saved tweet {tweet.item_id}")
        return result

    def remove(self, item_id: str) -> Dict[str, Any]:
        def modifier(tweets):
            for index, tweet in enumerate(tweets):
                if tweet.item_id == item_id:
                    del tweets[index]
                    return {"success": True}
            return {"success": False, "reason": REASON_NOT_FOUND, "save": False}

        return self._with_tweets(modifier)

    def update_fields(self, item_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        changes = validate_updates(updates)

        def modifier(tweets):
            for tweet in tweets:
                if tweet.item_id == item_id:
                    for key, value in changes.items():
                        setattr(tweet, key, value)
                    return {"success": True, "tweet": tweet}
            return {"success": False, "reason": REASON_NOT_FOUND, "save": False}

        return self._with_tweets(modifier)

    def exists(self, item_id: str) -> bool:
        return any(tweet.item_id == item_id for tweet in self._read())

    def import_batch(self, incoming: List[SavedTweet]) -> Dict[str, Any]:
        """Merge tweets, skipping ids already stored, newest first afterwards."""

        def modifier(tweets):
            known = {tweet.item_id for tweet in tweets}
            imported = skipped = 0
            for tweet in incoming:
                if tweet.item_id in known:
                    skipped += 1
                    continue
                tweets.append(tweet)
                known.add(tweet.item_id)
                imported += 1
            tweets.sort(key=sort_key, reverse=True)
            return {"success": True, "imported_count": imported, "skipped_count": skipped}

        result = self._with_tweets(modifier)
        if result["success"]:
            logger.info(
                f"📥 Import finished: {result['imported_count']} imported, "
                f"{result['skipped_count']} skipped"
            )
        return result

    def unread_count(self) -> int:
        return sum(1 for tweet in self._read() if tweet.status == STATUS_UNREAD)
