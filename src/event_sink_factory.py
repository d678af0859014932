"""
Factory function for creating analytics event sinks.
"""
import os

from src.event_sink import EventSink
from src.local_disk_event_sink import LocalDiskEventSink


def create_event_sink(state_dir: str = "state") -> EventSink:
    """
    Create an event sink based on environment configuration.

    Reads the EVENT_STORAGE_TYPE environment variable to determine
    which implementation to use:
    - 'local' or unset: LocalDiskEventSink (default)

    Args:
        state_dir: Directory for local disk storage (default: "state")

    Returns:
        EventSink: Configured event sink instance

    Raises:
        ValueError: If EVENT_STORAGE_TYPE names an unknown backend
    """
    storage_type = os.getenv('EVENT_STORAGE_TYPE', 'local').lower()

    if storage_type == 'local':
        return LocalDiskEventSink(state_dir=state_dir)
    raise ValueError(f"Unknown EVENT_STORAGE_TYPE: {storage_type}")
