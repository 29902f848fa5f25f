"""
Unit tests for PublicationService.
"""

from unittest.mock import MagicMock

import pytest

from feedkeeper.exceptions import StoreError
from feedkeeper.services.publication import PublicationService


def _seed(store, *links: str) -> None:
    for link in links:
        store.insert({
            "title": f"Title {link}",
            "link": link,
            "description": "",
            "publication_date": "",
            "posted": False,
        })


@pytest.fixture
def service(store):
    return PublicationService(store)


class TestListing:
    """Tests for list_all() and list_unposted()."""

    def test_list_all_includes_posted(self, service, store):
        _seed(store, "A", "B")
        service.mark_posted({"A"})

        assert [e.link for e in service.list_all()] == ["A", "B"]

    def test_list_unposted_is_exact_subset(self, service, store):
        _seed(store, "A", "B", "C", "D")
        service.mark_posted({"B", "D"})

        unposted = service.list_unposted()

        assert [e.link for e in unposted] == ["A", "C"]
        assert all(e.posted is False for e in unposted)

    def test_marked_entry_leaves_unposted_list(self, service, store):
        _seed(store, "A")
        assert [e.link for e in service.list_unposted()] == ["A"]

        service.mark_posted({"A"})

        assert service.list_unposted() == []

    def test_empty_store(self, service):
        assert service.list_all() == []
        assert service.list_unposted() == []


class TestMarkPosted:
    """Tests for mark_posted()."""

    def test_unknown_links_ignored(self, service, store):
        _seed(store, "A", "B", "C")

        modified = service.mark_posted({"A", "B", "X"})

        assert modified == 2
        posted = {e.link: e.posted for e in service.list_all()}
        assert posted == {"A": True, "B": True, "C": False}

    def test_already_posted_not_counted(self, service, store):
        _seed(store, "A", "B")
        service.mark_posted({"A"})

        assert service.mark_posted({"A", "B"}) == 1
        assert service.mark_posted({"A", "B"}) == 0

    def test_empty_set_returns_zero_without_store_call(self):
        store = MagicMock()
        service = PublicationService(store)

        assert service.mark_posted(set()) == 0
        store.update_many.assert_not_called()

    def test_accepts_any_iterable_with_duplicates(self, service, store):
        _seed(store, "A", "B")

        assert service.mark_posted(["A", "A", "B"]) == 2

    def test_large_batch(self, service, store):
        links = [f"https://example.com/{n}" for n in range(1200)]
        _seed(store, *links[:600])

        assert service.mark_posted(links) == 600
        assert service.list_unposted() == []

    def test_store_error_propagates(self):
        store = MagicMock()
        store.update_many.side_effect = StoreError("unavailable")
        service = PublicationService(store)

        with pytest.raises(StoreError):
            service.mark_posted({"A"})

    def test_filter_targets_unposted_links(self):
        store = MagicMock()
        store.update_many.return_value = 1
        service = PublicationService(store)

        service.mark_posted(["A"])

        store.update_many.assert_called_once_with({"link": {"A"}, "posted": False}, {"posted": True})
