"""
Abstract interface for analytics event storage.

Events are view/click/share counters sent by the public pages. Delivery is
at-most-once: a failed record is logged by the caller and dropped.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

EVENT_TYPES = ("view", "click", "share")


class EventSink(ABC):
    """Abstract base class for analytics event storage."""

    @abstractmethod
    def record(self, event: Dict[str, Any]) -> None:
        """
        Record one analytics event.

        Args:
            event: Event with at least 'article_id' and 'event_type' keys
        """

    @abstractmethod
    def load_events(self, article_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Load recorded events.

        Args:
            article_id: Only return events for this article when given

        Returns:
            List of event dictionaries, oldest first
        """

    def count_views(self, article_id: str) -> int:
        """Count 'view' events for an article."""
        return sum(1 for e in self.load_events(article_id) if e.get("event_type") == "view")
