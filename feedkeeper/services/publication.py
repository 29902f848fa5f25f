# feedkeeper/services/publication.py
"""
Publication state workflow.

Entries start unposted. A downstream publisher lists the unposted entries,
announces them, then marks the batch posted in one call.
"""

import logging
from collections.abc import Iterable

from feedkeeper.storage.base import EntryRecord, EntryStore

logger = logging.getLogger(__name__)


class PublicationService:
    """Queries and transitions of the `posted` flag."""

    def __init__(self, store: EntryStore):
        self.store = store

    def list_all(self) -> list[EntryRecord]:
        """All stored entries in store order."""
        return self.store.find_all()

    def list_unposted(self) -> list[EntryRecord]:
        """Entries not yet marked posted, in store order."""
        return self.store.find_all({"posted": False})

    def mark_posted(self, links: Iterable[str]) -> int:
        """
        Mark every stored, still-unposted entry whose link is in `links` as posted.

        Unknown links and entries that are already posted are ignored. The
        update is a single store transaction, so readers never see half a batch.

        Returns:
            Number of entries that changed from unposted to posted
        """
        link_set = set(links)
        if not link_set:
            return 0

        modified = self.store.update_many(
            {"link": link_set, "posted": False},
            {"posted": True},
        )
        logger.info(
            f"Marked {modified} of {len(link_set)} requested entries as posted",
            extra={"event": "entries_marked_posted", "requested": len(link_set), "modified_count": modified},
        )
        return modified
