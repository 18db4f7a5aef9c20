#!/usr/bin/env python3
"""
Library Controller
Connects a ListViewEngine to its persistence backend (LibraryStore for the
library, MirrorFetcher for the read-only mirror). The backend's result
decides whether the in-memory view changes.
"""

import logging
from typing import Any, Callable, Dict, List, Optional
from data_parser import parse_backup_document
from errors import LibraryError
from library_store import REASON_DUPLICATE
from models import STATUS_ARCHIVED, STATUS_UNREAD
from storage import write_backup, write_mirror
from view_engine import ListViewEngine

logger = logging.getLogger(__name__)


class LibraryController:
    def __init__(
        self,
        engine: ListViewEngine,
        backend: Any,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.engine = engine
        self.backend = backend
        self.notify = notify or (lambda message: logger.warning(message))

    def load(self) -> bool:
        """Load the collection; a failure switches the view to its error state."""
        try:
            response = self.backend.list_all()
        except LibraryError as e:
            response = {"success": False, "error": str(e)}
        if not response.get("success"):
            self.engine.show_error(response.get("error"))
            return False
        self.engine.set_all(response["tweets"])
        self.engine.render()
        logger.info(f"📚 Loaded {len(response['tweets']):,} tweets")
        return True

    def _editable(self, action: str) -> bool:
        if self.engine.flavor.allows_edits:
            return True
        self.notify(f"{action} is not available in the read-only view")
        return False

    def _call(self, operation: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
        try:
            return operation()
        except LibraryError as e:
            return {"success": False, "error": str(e)}

    def save_discovered(self, event: Dict[str, Any]) -> bool:
        """Persist a tweet found on a page ({id/tweetId, url, author, text})."""
        if not self._editable("Saving"):
            return False
        result = self._call(lambda: self.backend.save(event))
        if not result.get("success"):
            if result.get("reason") != REASON_DUPLICATE:
                self.notify(f"Failed to save tweet: {result.get('error') or result.get('reason')}")
            return False
        self.engine.add_item(result["tweet"])
        return True

    def toggle_status(self, item_id: str) -> bool:
        tweet = self.engine.store.find(item_id)
        if tweet is None:
            self.notify(f"Tweet {item_id} is not in the library")
            return False
        new_status = STATUS_UNREAD if tweet.status == STATUS_ARCHIVED else STATUS_ARCHIVED
        return self._update(item_id, {"status": new_status})

    def edit(
        self,
        item_id: str,
        tags: Optional[List[str]] = None,
        note: Optional[str] = None,
        status: Optional[str] = None,
    ) -> bool:
        updates = {"tags": tags, "note": note, "status": status}
        return self._update(item_id, {k: v for k, v in updates.items() if v is not None})

    def _update(self, item_id: str, updates: Dict[str, Any]) -> bool:
        if not self._editable("Editing"):
            return False
        result = self._call(lambda: self.backend.update_fields(item_id, updates))
        if not result.get("success"):
            self.notify("Failed to save changes")
            return False
        self.engine.update_item(item_id, updates)
        return True

    def delete(self, item_id: str) -> bool:
        if not self._editable("Deleting"):
            return False
        result = self._call(lambda: self.backend.remove(item_id))
        if not result.get("success"):
            self.notify("Failed to delete tweet")
            return False
        self.engine.remove_item(item_id)
        return True

    def import_document(self, data: Any) -> Optional[Dict[str, Any]]:
        """Import a backup document; returns the import counts or None."""
        if not self._editable("Importing"):
            return None
        try:
            tweets = parse_backup_document(data)
        except LibraryError as e:
            self.notify(f"Failed to import: {e}")
            return None
        result = self._call(lambda: self.backend.import_batch(tweets))
        if not result.get("success"):
            self.notify("Failed to import: Import failed")
            return None
        self.load()
        return {"imported_count": result["imported_count"], "skipped_count": result["skipped_count"]}

    def export_backup(self, out_path: str) -> bool:
        return write_backup(self.engine.get_all(), out_path)

    def export_mirror(self, out_path: str) -> bool:
        return write_mirror(self.engine.get_all(), out_path)

    def tags(self) -> List[str]:
        return self.engine.available_tags()

    def stats_label(self) -> str:
        return self.engine.stats_label()
