"""
Local disk implementation of analytics event storage.
"""
from typing import Any, Dict, List, Optional

from src.base_store import BaseLocalDiskStore
from src.event_sink import EventSink
from src.file_utils import get_utc_timestamp


class LocalDiskEventSink(BaseLocalDiskStore, EventSink):
    """
    Local disk implementation of analytics event storage.

    Stores events in a JSON file on the local filesystem.
    Default location: state/events.json
    """

    def _get_filename(self) -> str:
        """Get the filename for event storage."""
        return "events.json"

    def record(self, event: Dict[str, Any]) -> None:
        """
        Append an event to local disk.

        Args:
            event: Event data; a 'timestamp' is added when missing
        """
        data = self._load_data({"version": "1.0", "events": []})

        event_copy = event.copy()
        event_copy.setdefault("timestamp", get_utc_timestamp())
        data["events"].append(event_copy)

        self._save_data(data)

    def load_events(self, article_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Load events from local disk.

        Args:
            article_id: Optional article filter

        Returns:
            List of event dictionaries
        """
        events = self._load_data({"version": "1.0", "events": []}).get("events", [])
        if article_id is None:
            return events
        return [e for e in events if e.get("article_id") == article_id]
