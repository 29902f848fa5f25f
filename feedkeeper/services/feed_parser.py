# feedkeeper/services/feed_parser.py
"""
Feed document parsing.

Turns fetched bytes into raw entries in document order. feedparser is
tolerant by default; here any well-formedness problem is a ParseError so that
a broken document never yields a half-read snapshot.
"""

import logging
from typing import TypedDict

import feedparser
from feedparser.exceptions import CharacterEncodingOverride

from feedkeeper.exceptions import ParseError

logger = logging.getLogger(__name__)

# RawEntry key -> feedparser entry key, for keys feedparser only sets from their own element.
# link and description are resolved separately, see _entry_link and _entry_description.
ENTRY_FIELD_MAP = {
    "title": "title",
    "published": "published",  # RSS <pubDate>, Atom <published>
}


class RawEntry(TypedDict, total=False):
    """One feed item as found in the document. Keys are present only if the item has them."""

    title: str
    link: str
    description: str
    published: str


def _entry_link(item) -> str | None:
    """
    The item's own link element, if any.

    feedparser copies a permalink <guid> into `link` when the item has no
    link element and flags that with `guidislink`. Real RSS <link> and Atom
    rel="alternate" elements are always listed in `links`.
    """
    if not item.get("guidislink"):
        return item.get("link")

    for link in item.get("links", []):
        if link.get("rel") == "alternate" and link.get("href"):
            return link["href"]
    return None


def _entry_description(item) -> str | None:
    """
    The item's RSS <description> or Atom <summary>, if any.

    feedparser fills `summary` from the first content block (e.g.
    <content:encoded>) when the item has no summary of its own.
    """
    summary = item.get("summary")
    if summary is None:
        return None

    content = item.get("content") or []
    if content and content[0].get("value") == summary:
        return None
    return summary


def parse_feed(content: bytes) -> list[RawEntry]:
    """
    Parse a feed document.

    Args:
        content: Raw bytes of an RSS or Atom document

    Returns:
        Raw entries in document order (empty for a feed without items)

    Raises:
        ParseError: If the bytes are not a well-formed, recognised feed
    """
    parsed = feedparser.parse(content, sanitize_html=False, resolve_relative_uris=False)

    if parsed.get("bozo"):
        exc = parsed.get("bozo_exception")
        # An encoding declared one way but decoded another is still a usable document
        if not isinstance(exc, CharacterEncodingOverride):
            raise ParseError(f"Malformed feed document: {exc}")

    if not parsed.get("version"):
        raise ParseError("Document is not a recognised RSS or Atom feed")

    entries: list[RawEntry] = []
    for item in parsed.entries:
        raw: RawEntry = {}
        for field, source_key in ENTRY_FIELD_MAP.items():
            value = item.get(source_key)
            if value is not None:
                raw[field] = value

        link = _entry_link(item)
        if link is not None:
            raw["link"] = link
        description = _entry_description(item)
        if description is not None:
            raw["description"] = description
        entries.append(raw)

    logger.debug(f"Parsed {parsed.version} feed with {len(entries)} entries")
    return entries
