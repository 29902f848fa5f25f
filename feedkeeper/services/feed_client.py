# feedkeeper/services/feed_client.py
"""
HTTP client for the configured feed.

Returns the raw response body. Every transport problem (DNS, connect, timeout)
and every non-2xx status becomes a FetchError. Nothing is retried here; the
next scheduled tick is the retry.
"""

import logging

import httpx

from feedkeeper.exceptions import FetchError

logger = logging.getLogger(__name__)


class FeedClient:
    """Fetch the feed document over HTTP."""

    DEFAULT_TIMEOUT = 30.0
    DEFAULT_USER_AGENT = "feedkeeper/1.0"
    ACCEPT = "application/rss+xml, application/atom+xml, application/xml;q=0.9, text/xml;q=0.9, */*;q=0.1"

    def __init__(
        self,
        feed_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.Client | None = None,
    ):
        """
        Initialize the feed client.

        Args:
            feed_url: URL of the feed document
            timeout: HTTP request timeout in seconds
            user_agent: User-Agent header value
            client: Pre-built httpx client (tests inject one with a mock transport)
        """
        self.feed_url = feed_url
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={
                "User-Agent": user_agent,
                "Accept": self.ACCEPT,
            },
        )

    def fetch(self) -> bytes:
        """
        Download the feed document.

        Returns:
            The full response body

        Raises:
            FetchError: On transport failure or a non-2xx response
        """
        try:
            response = self.client.get(self.feed_url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            raise FetchError(f"Feed {self.feed_url} returned HTTP {status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch feed {self.feed_url}: {e}") from e

        logger.info(
            f"Fetched feed {self.feed_url} ({len(response.content)} bytes)",
            extra={"event": "feed_fetched", "feed_url": self.feed_url, "status_code": response.status_code},
        )
        return response.content

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self.client.close()
