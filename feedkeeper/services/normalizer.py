# feedkeeper/services/normalizer.py
"""Map raw feed entries to the canonical entry record."""

from feedkeeper.services.feed_parser import RawEntry
from feedkeeper.storage.base import NormalizedEntry


def _text(value: str | None) -> str:
    return value if value is not None else ""


def normalize_entry(raw: RawEntry) -> NormalizedEntry:
    """Copy fields verbatim, substituting "" for missing ones. New entries are never posted."""
    return NormalizedEntry(
        title=_text(raw.get("title")),
        link=_text(raw.get("link")),
        description=_text(raw.get("description")),
        publication_date=_text(raw.get("published")),
        posted=False,
    )
