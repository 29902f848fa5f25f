"""
Factory functions for the process-wide entry store.
"""

import logging
from typing import Optional

from feedkeeper.storage.base import EntryStore

logger = logging.getLogger(__name__)

# Global singleton instance, shared by the scheduler and every request handler
_entry_store: Optional[EntryStore] = None


def get_entry_store() -> EntryStore:
    """
    Get or create the shared entry store.

    Also used as a FastAPI dependency, so handlers receive the same handle
    as the periodic checker.
    """
    global _entry_store

    if _entry_store is not None:
        return _entry_store

    from feedkeeper.storage.sql_store import SqlEntryStore

    _entry_store = SqlEntryStore()
    logger.info(f"Entry store initialized: {_entry_store.name}")
    return _entry_store


def set_entry_store(store: EntryStore) -> None:
    """Install `store` as the shared handle, e.g. one bound to a test database."""
    global _entry_store
    _entry_store = store
    logger.debug(f"Entry store replaced: {store.name}")


def reset_entry_store() -> None:
    """Forget the shared handle; the next get_entry_store() builds a fresh SqlEntryStore."""
    global _entry_store
    _entry_store = None
