"""
Entry store: a keyed document store for feed entries.
"""

from feedkeeper.storage.base import EntryRecord, EntryStore, NormalizedEntry
from feedkeeper.storage.factory import get_entry_store, reset_entry_store, set_entry_store

__all__ = [
    "EntryRecord",
    "EntryStore",
    "NormalizedEntry",
    "get_entry_store",
    "reset_entry_store",
    "set_entry_store",
]
