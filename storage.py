import os
import json
import logging
from pathlib import Path
from typing import List, Dict, Any, Optional
from data_parser import utc_now_iso
from models import SavedTweet

logger = logging.getLogger(__name__)


def ensure_dir(path: str):
    if path:
        Path(path).mkdir(parents=True, exist_ok=True)


def save_json(data: Any, out_path: str) -> bool:
    try:
        ensure_dir(os.path.dirname(out_path))
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Error saving JSON to {out_path}: {e}")
        return False


def load_json(path: str) -> Optional[Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.error(f"File not found: {path}")
        return None
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error reading JSON from {path}: {e}")
        return None


def export_library_document(tweets: List[SavedTweet], exported_at: Optional[str] = None) -> Dict[str, Any]:
    """Full backup: versioned wrapper around the tweets."""
    return {
        "version": 1,
        "exportedAt": exported_at or utc_now_iso(),
        "tweets": [tweet.to_dict() for tweet in tweets],
    }


def export_mirror_document(tweets: List[SavedTweet]) -> List[Dict[str, Any]]:
    """Mirror export: the bare tweet array the read-only page loads."""
    return [tweet.to_dict() for tweet in tweets]


def write_backup(tweets: List[SavedTweet], out_path: str) -> bool:
    return save_json(export_library_document(tweets), out_path)


def write_mirror(tweets: List[SavedTweet], out_path: str) -> bool:
    return save_json(export_mirror_document(tweets), out_path)


def get_file_summary(path: str) -> Dict[str, Any]:
    try:
        size = os.path.getsize(path)
        data = load_json(path)
        if isinstance(data, dict):
            data = data.get("tweets", [])
        count = len(data) if isinstance(data, list) else 0
        return {"file": path, "size_bytes": size, "tweet_count": count}
    except OSError as e:
        return {"file": path, "error": str(e)}
