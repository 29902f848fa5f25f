# feedkeeper/services/ingestion.py
"""
Feed ingestion service.

Pipeline:
1. Fetch the feed document
2. Parse it into raw entries
3. Normalize each entry
4. Deduplicate by link against the entry store
5. Insert entries seen for the first time

Fetch, parse and store errors abort the run and propagate to the caller.
Entries already stored are never modified here, even if the feed changed
their title or description.
"""

import logging
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime
from functools import lru_cache

from feedkeeper.config import get_settings
from feedkeeper.logging_config import log_stage
from feedkeeper.services.feed_client import FeedClient
from feedkeeper.services.feed_parser import parse_feed
from feedkeeper.services.normalizer import normalize_entry
from feedkeeper.storage.base import EntryStore
from feedkeeper.storage.factory import get_entry_store

logger = logging.getLogger(__name__)


@dataclass
class IngestRunResult:
    """Outcome of one ingestion run."""

    trace_id: str
    started_at: datetime
    finished_at: datetime
    duration_ms: int
    total_entries: int
    ingested: int
    skipped_existing: int

    def to_dict(self) -> dict:
        return asdict(self)


class IngestionService:
    """Fetch, parse, deduplicate and persist entries of the configured feed."""

    def __init__(self, store: EntryStore, client: FeedClient):
        self.store = store
        self.client = client

    def ingest_once(self, trace_id: str | None = None) -> IngestRunResult:
        """
        Run one ingestion cycle.

        Safe to call concurrently from the scheduler and an on-demand trigger:
        the store rejects a second insert of the same link, which is counted
        as skipped.

        Returns:
            IngestRunResult with counts for this run

        Raises:
            FetchError: Feed could not be downloaded (nothing is stored)
            ParseError: Feed document is malformed (nothing is stored)
            StoreError: Store failed mid-run (earlier inserts stay committed)
        """
        if trace_id is None:
            trace_id = str(uuid.uuid4())

        started_at = datetime.utcnow()
        ingested = 0
        skipped_existing = 0

        with log_stage("ingest", trace_id=trace_id):
            content = self.client.fetch()
            raw_entries = parse_feed(content)

            for raw in raw_entries:
                entry = normalize_entry(raw)

                if self.store.find_one(entry["link"]) is not None:
                    skipped_existing += 1
                    continue

                if self.store.insert(entry):
                    ingested += 1
                    logger.info(f"Stored: {entry['title']}", extra={"event": "entry_stored", "link": entry["link"]})
                else:
                    # Another run inserted the same link between our check and insert
                    skipped_existing += 1

            finished_at = datetime.utcnow()
            result = IngestRunResult(
                trace_id=trace_id,
                started_at=started_at,
                finished_at=finished_at,
                duration_ms=int((finished_at - started_at).total_seconds() * 1000),
                total_entries=len(raw_entries),
                ingested=ingested,
                skipped_existing=skipped_existing,
            )
            logger.info(
                f"Feed processing complete: {ingested} new, {skipped_existing} already stored",
                extra={
                    "event": "ingest_complete",
                    "total_entries": result.total_entries,
                    "ingested": ingested,
                    "skipped_existing": skipped_existing,
                },
            )

        return result


@lru_cache(maxsize=1)
def get_ingestion_service() -> IngestionService:
    """Process-wide ingestion service bound to the shared store and feed client."""
    settings = get_settings()
    client = FeedClient(
        settings.FEED_URL,
        timeout=settings.FETCH_TIMEOUT_SECONDS,
        user_agent=settings.USER_AGENT,
    )
    return IngestionService(store=get_entry_store(), client=client)
