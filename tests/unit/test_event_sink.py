"""
Unit tests for analytics event sinks.
"""
import json
import os

import pytest

from src.event_sink import EventSink
from src.local_disk_event_sink import LocalDiskEventSink
from tests.unit.test_store_base import BaseLocalDiskStoreTests


class TestLocalDiskEventSink(BaseLocalDiskStoreTests):
    """Test suite for LocalDiskEventSink."""

    @pytest.fixture
    def sink(self, temp_state_dir):
        """Create a LocalDiskEventSink instance."""
        return LocalDiskEventSink(state_dir=temp_state_dir)

    def test_implements_interface(self, sink):
        assert isinstance(sink, EventSink)

    def test_load_events_file_not_exists(self, sink):
        assert sink.load_events() == []

    def test_record_adds_timestamp(self, sink, temp_state_dir):
        sink.record({"article_id": "a1", "event_type": "view"})

        with open(os.path.join(temp_state_dir, "events.json"), 'r', encoding='utf-8') as f:
            data = json.load(f)
        assert data["version"] == "1.0"
        assert data["events"][0]["timestamp"].endswith("Z")

    def test_record_keeps_given_timestamp(self, sink):
        event = {"article_id": "a1", "event_type": "click", "timestamp": "2024-11-08T12:00:00Z"}

        sink.record(event)

        assert sink.load_events()[0]["timestamp"] == "2024-11-08T12:00:00Z"
        assert "timestamp" in event

    def test_record_does_not_mutate_input(self, sink):
        event = {"article_id": "a1", "event_type": "view"}
        sink.record(event)
        assert "timestamp" not in event

    def test_filter_and_count_views(self, sink):
        sink.record({"article_id": "a1", "event_type": "view"})
        sink.record({"article_id": "a1", "event_type": "share"})
        sink.record({"article_id": "a1", "event_type": "view"})
        sink.record({"article_id": "a2", "event_type": "view"})

        assert len(sink.load_events("a1")) == 3
        assert len(sink.load_events()) == 4
        assert sink.count_views("a1") == 2
        assert sink.count_views("missing") == 0
