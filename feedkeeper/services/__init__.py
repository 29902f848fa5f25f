"""
Services for the feed ingestion pipeline and the publication workflow.
"""

from feedkeeper.services.feed_client import FeedClient
from feedkeeper.services.feed_parser import RawEntry, parse_feed
from feedkeeper.services.ingestion import IngestionService, IngestRunResult, get_ingestion_service
from feedkeeper.services.normalizer import normalize_entry
from feedkeeper.services.publication import PublicationService
from feedkeeper.services.scheduler import FeedScheduler

__all__ = [
    "FeedClient",
    "FeedScheduler",
    "IngestionService",
    "IngestRunResult",
    "PublicationService",
    "RawEntry",
    "get_ingestion_service",
    "normalize_entry",
    "parse_feed",
]
