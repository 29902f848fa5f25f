# tests/conftest.py
"""
Pytest configuration and fixtures.
"""

import os
from xml.sax.saxutils import escape

import httpx
import pytest

# Set test environment before any feedkeeper module reads settings
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("FEED_URL", "https://feeds.example.com/rss")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from sqlalchemy.orm import sessionmaker  # noqa: E402

from feedkeeper.database import create_db_engine, init_db  # noqa: E402
from feedkeeper.services.feed_client import FeedClient  # noqa: E402
from feedkeeper.storage.sql_store import SqlEntryStore  # noqa: E402

FEED_URL = "https://feeds.example.com/rss"


def build_rss(items: list[dict]) -> bytes:
    """
    Build an RSS 2.0 document.

    Each item dict may carry title, link, description, pubDate, guid and
    content (emitted as <content:encoded>); missing keys produce items
    without that element.
    """
    parts = []
    for item in items:
        fields = "".join(
            f"<{tag}>{escape(item[tag])}</{tag}>"
            for tag in ("title", "link", "description", "pubDate", "guid")
            if tag in item
        )
        if "content" in item:
            fields += f"<content:encoded>{escape(item['content'])}</content:encoded>"
        parts.append(f"<item>{fields}</item>")

    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">'
        "<channel>"
        "<title>Example Feed</title>"
        "<link>https://example.com/</link>"
        "<description>Test feed</description>"
        f"{''.join(parts)}"
        "</channel></rss>"
    ).encode("utf-8")


def rss_item(n: int, **overrides) -> dict:
    """A complete RSS item for link https://example.com/posts/<n>."""
    item = {
        "title": f"Post {n}",
        "link": f"https://example.com/posts/{n}",
        "description": f"Summary of post {n}",
        "pubDate": "Mon, 06 Jan 2025 10:00:00 +0000",
    }
    item.update(overrides)
    return item


class FakeFeedServer:
    """Serves a configurable response to a FeedClient through httpx.MockTransport."""

    def __init__(self):
        self.content = build_rss([])
        self.status_code = 200
        self.error: Exception | None = None
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, content=self.content)

    def serve(self, items: list[dict]) -> None:
        self.content = build_rss(items)

    def client(self) -> FeedClient:
        return FeedClient(FEED_URL, client=httpx.Client(transport=httpx.MockTransport(self.handler)))


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with the entries table."""
    engine = create_db_engine("sqlite://")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    """SqlEntryStore bound to the fresh database."""
    return SqlEntryStore(sessionmaker(bind=engine, autoflush=False, future=True))


@pytest.fixture
def feed_server():
    return FakeFeedServer()


@pytest.fixture
def feed_client(feed_server):
    client = feed_server.client()
    yield client
    client.client.close()


@pytest.fixture
def make_rss():
    return build_rss


@pytest.fixture
def make_item():
    return rss_item
