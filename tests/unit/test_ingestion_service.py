"""
Unit tests for IngestionService.

Covers first-sighting inserts, link-based deduplication across runs,
untouched existing entries, and error propagation from each stage.
"""

from unittest.mock import MagicMock

import pytest

from feedkeeper.exceptions import FetchError, ParseError, StoreError
from feedkeeper.services.ingestion import IngestionService


@pytest.fixture
def service(store, feed_client):
    return IngestionService(store=store, client=feed_client)


class TestIngestOnce:
    """Tests for ingest_once() against a real store."""

    def test_inserts_all_new_entries(self, service, store, feed_server, make_item):
        feed_server.serve([make_item(1), make_item(2), make_item(3)])

        result = service.ingest_once()

        assert result.total_entries == 3
        assert result.ingested == 3
        assert result.skipped_existing == 0
        entries = store.find_all()
        assert [e.link for e in entries] == [
            "https://example.com/posts/1",
            "https://example.com/posts/2",
            "https://example.com/posts/3",
        ]
        assert all(e.posted is False for e in entries)

    def test_second_run_is_idempotent(self, service, store, feed_server, make_item):
        feed_server.serve([make_item(1), make_item(2)])

        service.ingest_once()
        before = store.find_all()
        result = service.ingest_once()

        assert result.ingested == 0
        assert result.skipped_existing == 2
        assert store.find_all() == before

    def test_only_new_link_inserted_and_existing_untouched(self, service, store, feed_server, make_item):
        """L1-L3 stored, L1 posted; a feed with L1-L4 only adds L4 and keeps L1 posted."""
        feed_server.serve([make_item(1), make_item(2), make_item(3)])
        service.ingest_once()
        store.update_many({"link": ["https://example.com/posts/1"]}, {"posted": True})

        feed_server.serve([
            make_item(1, title="Retitled upstream"),
            make_item(2, description="Changed upstream"),
            make_item(3),
            make_item(4),
        ])
        result = service.ingest_once()

        assert result.ingested == 1
        assert result.skipped_existing == 3
        first = store.find_one("https://example.com/posts/1")
        assert first.posted is True
        assert first.title == "Post 1"
        assert store.find_one("https://example.com/posts/2").description == "Summary of post 2"
        assert store.find_one("https://example.com/posts/4").posted is False
        assert store.count() == 4

    def test_same_link_twice_in_one_feed_stored_once(self, service, store, feed_server, make_item):
        feed_server.serve([make_item(1, title="First"), make_item(1, title="Second")])

        result = service.ingest_once()

        assert result.ingested == 1
        assert result.skipped_existing == 1
        assert store.find_one("https://example.com/posts/1").title == "First"

    def test_missing_description_stored_as_empty_string(self, service, store, feed_server):
        feed_server.serve([{"title": "No summary", "link": "https://example.com/bare"}])

        service.ingest_once()

        entry = store.find_one("https://example.com/bare")
        assert entry.description == ""
        assert entry.publication_date == ""

    def test_guid_only_items_share_the_empty_link(self, service, store, feed_server):
        """A <guid> is not a link: link-less items collapse onto one entry keyed by ""."""
        feed_server.serve([
            {"title": "First", "guid": "https://example.com/guid-1"},
            {"title": "Second", "guid": "https://example.com/guid-2"},
        ])

        result = service.ingest_once()

        assert result.ingested == 1
        assert result.skipped_existing == 1
        assert store.find_one("https://example.com/guid-1") is None
        assert store.find_one("").title == "First"

    def test_content_only_item_stored_without_description(self, service, store, feed_server):
        feed_server.serve([{"title": "Body only", "link": "https://example.com/a", "content": "full body"}])

        service.ingest_once()

        assert store.find_one("https://example.com/a").description == ""

    def test_empty_feed_is_a_valid_run(self, service, store, feed_server):
        feed_server.serve([])

        result = service.ingest_once()

        assert result.total_entries == 0
        assert result.ingested == 0
        assert store.count() == 0

    def test_uses_given_trace_id(self, service, feed_server, make_item):
        feed_server.serve([make_item(1)])

        result = service.ingest_once(trace_id="trace-123")

        assert result.trace_id == "trace-123"
        assert result.finished_at >= result.started_at


class TestIngestOnceErrors:
    """Errors abort the run and propagate."""

    def test_fetch_error_leaves_store_unchanged(self, service, store, feed_server, make_item):
        feed_server.serve([make_item(1)])
        service.ingest_once()
        before = store.find_all()

        feed_server.serve([make_item(1), make_item(2)])
        feed_server.status_code = 502

        with pytest.raises(FetchError):
            service.ingest_once()

        assert store.find_all() == before

    def test_parse_error_inserts_nothing(self, service, store, feed_server):
        feed_server.content = b"<rss version='2.0'><channel><item><title>broken</channel>"

        with pytest.raises(ParseError):
            service.ingest_once()

        assert store.count() == 0

    def test_store_error_propagates(self, feed_client, feed_server, make_item):
        feed_server.serve([make_item(1), make_item(2)])
        store = MagicMock()
        store.find_one.side_effect = StoreError("connection refused")
        service = IngestionService(store=store, client=feed_client)

        with pytest.raises(StoreError, match="connection refused"):
            service.ingest_once()

        store.insert.assert_not_called()

    def test_store_error_mid_run_keeps_earlier_inserts(self, feed_client, feed_server, make_item):
        """A store failure on the second entry stops the run after the first insert."""
        feed_server.serve([make_item(1), make_item(2), make_item(3)])
        store = MagicMock()
        store.find_one.return_value = None
        store.insert.side_effect = [True, StoreError("disk full")]
        service = IngestionService(store=store, client=feed_client)

        with pytest.raises(StoreError):
            service.ingest_once()

        assert store.insert.call_count == 2


class TestInsertRace:
    """A concurrent run can insert the same link between check and insert."""

    def test_lost_insert_counted_as_skipped(self, feed_client, feed_server, make_item):
        feed_server.serve([make_item(1)])
        store = MagicMock()
        store.find_one.return_value = None
        store.insert.return_value = False
        service = IngestionService(store=store, client=feed_client)

        result = service.ingest_once()

        assert result.ingested == 0
        assert result.skipped_existing == 1

