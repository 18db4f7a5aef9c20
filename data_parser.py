import logging
from typing import Dict, Any, List, Optional
from datetime import datetime, timezone
from errors import ValidationError
from models import (
    SavedTweet,
    ViewCriteria,
    STATUS_ARCHIVED,
    STATUS_UNREAD,
    STATUSES,
    FILTER_ALL,
    SORT_ORDERS,
)

BACKUP_VERSION = 1
UPDATABLE_FIELDS = ("tags", "note", "status")

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_saved_at(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 savedAt value into an aware datetime.
    Naive values are taken as UTC; unparseable values return None.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_date(dt: datetime) -> str:
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"


def format_saved_date(value: Optional[str]) -> str:
    dt = parse_saved_at(value)
    if dt is None:
        return "Unknown date"
    return format_date(dt)


def extract_tweet_id(raw: Any) -> Optional[str]:
    if not isinstance(raw, dict):
        return None
    tweet_id = raw.get("tweetId", raw.get("id"))
    if isinstance(tweet_id, str) and tweet_id:
        return tweet_id
    return None


def normalize_tweet(raw: Dict[str, Any], defaults: Optional[Dict[str, Any]] = None) -> SavedTweet:
    """
    Normalize a raw tweet record into a SavedTweet.
    Missing or empty string fields fall back to defaults, then to "".
    """
    defaults = defaults or {}
    tweet_id = extract_tweet_id(raw)
    if tweet_id is None:
        raise ValidationError("Tweet record needs a string tweetId")

    def get_str(field, fallback=""):
        val = raw.get(field) or defaults.get(field)
        return str(val) if val else fallback

    tags = raw.get("tags")
    if not isinstance(tags, list):
        tags = defaults.get("tags") or []

    if raw.get("status") == STATUS_ARCHIVED:
        status = STATUS_ARCHIVED
    else:
        status = defaults.get("status") or STATUS_UNREAD

    return SavedTweet(
        item_id=tweet_id,
        url=get_str("url"),
        author=get_str("author"),
        text=get_str("text"),
        saved_at=get_str("savedAt") or utc_now_iso(),
        tags=[str(tag) for tag in tags],
        note=get_str("note"),
        status=status,
    )


def parse_criteria(raw: Optional[Dict[str, Any]] = None) -> ViewCriteria:
    """Build ViewCriteria from filter-control values, rejecting unknown choices."""
    raw = raw or {}
    search_term = raw.get("search_term", raw.get("searchTerm", ""))
    status_filter = raw.get("status_filter", raw.get("status", FILTER_ALL))
    tag_filter = raw.get("tag_filter", raw.get("tag", FILTER_ALL))
    sort_order = raw.get("sort_order", raw.get("sort", "newest"))

    if not isinstance(search_term, str):
        raise ValidationError(f"search term must be a string, got {type(search_term).__name__}")
    if status_filter != FILTER_ALL and status_filter not in STATUSES:
        raise ValidationError(f"Unknown status filter: {status_filter!r}")
    if not isinstance(tag_filter, str) or not tag_filter:
        raise ValidationError(f"Invalid tag filter: {tag_filter!r}")
    if sort_order not in SORT_ORDERS:
        raise ValidationError(f"Unknown sort order: {sort_order!r}")

    return ViewCriteria(
        search_term=search_term,
        status_filter=status_filter,
        tag_filter=tag_filter,
        sort_order=sort_order,
    )


def validate_updates(updates: Dict[str, Any]) -> Dict[str, Any]:
    """Check updatable fields and their shapes; None values are skipped."""
    if not isinstance(updates, dict):
        raise ValidationError("updates must be a mapping")
    unknown = sorted(set(updates) - set(UPDATABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")
    clean = {}
    for key in UPDATABLE_FIELDS:
        if key not in updates or updates[key] is None:
            continue
        value = updates[key]
        if key == "tags":
            if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
                raise ValidationError("tags must be a list of strings")
            value = list(value)
        elif key == "note":
            if not isinstance(value, str):
                raise ValidationError("note must be a string")
        elif value not in STATUSES:
            raise ValidationError(f"Unknown status: {value!r}")
        clean[key] = value
    return clean


def parse_tag_list(text: str) -> List[str]:
    """Split a comma separated tag field, dropping blanks."""
    return [tag.strip() for tag in text.split(",") if tag.strip()]


def parse_backup_document(data: Any) -> List[SavedTweet]:
    """
    Validate a full backup document and return its usable tweets.
    Records without a string tweetId are skipped one by one.
    """
    if not isinstance(data, dict) or not isinstance(data.get("tweets"), list):
        raise ValidationError("Invalid backup file format")
    if data.get("version") != BACKUP_VERSION:
        raise ValidationError("Unsupported backup version")

    tweets = []
    for position, raw in enumerate(data["tweets"]):
        if extract_tweet_id(raw) is None:
            logger.warning(f"Skipping backup record {position}: missing tweetId")
            continue
        tweets.append(normalize_tweet(raw))

    if not tweets:
        raise ValidationError("No valid tweets found in backup")
    return tweets


def parse_mirror_document(data: Any) -> List[SavedTweet]:
    """Accept the bare array mirror format or a wrapped backup document."""
    if isinstance(data, list):
        records = data
    elif isinstance(data, dict) and isinstance(data.get("tweets"), list):
        records = data["tweets"]
    else:
        raise ValidationError("Invalid data format")
    return [normalize_tweet(raw) for raw in records if extract_tweet_id(raw) is not None]
