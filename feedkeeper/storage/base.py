# feedkeeper/storage/base.py
"""
Entry store interface.

The ingestion pipeline and the publication workflow only need a keyed
document store with four operations: find one by link, find many by filter,
insert, and update many by filter. Implementations must:
- Treat `link` as unique and report an insert conflict instead of duplicating
- Apply each update_many call atomically as seen by concurrent readers
- Wrap driver failures in StoreError
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any, TypedDict

# Fields a filter or an update may name
ENTRY_FIELDS = ("title", "link", "description", "publication_date", "posted")

EntryFilter = Mapping[str, Any]


class NormalizedEntry(TypedDict):
    """Canonical entry ready to be inserted. All text fields are strings, never None."""

    title: str
    link: str
    description: str
    publication_date: str
    posted: bool


@dataclass(frozen=True)
class EntryRecord:
    """A stored entry as returned by the store."""

    title: str
    link: str
    description: str
    publication_date: str
    posted: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def is_membership(value: Any) -> bool:
    """Filter values that are collections mean "field IN value"."""
    return isinstance(value, (list, tuple, set, frozenset))


def validate_fields(fields: Mapping[str, Any]) -> None:
    """Reject field names that are not part of the entry record."""
    unknown = [name for name in fields if name not in ENTRY_FIELDS]
    if unknown:
        raise ValueError(f"Unknown entry field(s): {', '.join(sorted(unknown))}")


class EntryStore(ABC):
    """
    Abstract keyed-document store for entries.

    Filters map field names to values. A scalar value matches by equality,
    a list/tuple/set value matches by membership. An empty filter matches all.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Store name (e.g., 'sql')."""
        pass

    @abstractmethod
    def find_one(self, link: str) -> EntryRecord | None:
        """Return the entry stored under `link`, or None."""
        pass

    @abstractmethod
    def find_all(self, filter: EntryFilter | None = None) -> list[EntryRecord]:
        """Return all entries matching `filter`, in store-native order."""
        pass

    @abstractmethod
    def insert(self, entry: NormalizedEntry) -> bool:
        """
        Insert a new entry.

        Returns:
            True if the entry was stored, False if an entry with the same link
            already exists.
        """
        pass

    @abstractmethod
    def update_many(self, filter: EntryFilter, set_fields: Mapping[str, Any]) -> int:
        """
        Set `set_fields` on every entry matching `filter`, atomically.

        Returns:
            Number of entries modified.
        """
        pass

    @abstractmethod
    def count(self, filter: EntryFilter | None = None) -> int:
        """Number of entries matching `filter`."""
        pass
