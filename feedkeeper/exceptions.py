# feedkeeper/exceptions.py
"""
Error taxonomy for the ingestion pipeline.

Every error here is fatal to the current ingestion run. The on-demand trigger
reports it to its caller; the scheduler logs it and waits for the next tick.
"""


class FeedKeeperError(Exception):
    """Base class for all service errors."""

    pass


class FetchError(FeedKeeperError):
    """The feed could not be retrieved (DNS, connect, timeout, non-2xx)."""

    pass


class ParseError(FeedKeeperError):
    """The fetched bytes are not a well-formed feed document."""

    pass


class StoreError(FeedKeeperError):
    """The entry store is unavailable or an operation on it failed."""

    pass
