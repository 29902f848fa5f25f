# feedkeeper/storage/sql_store.py
"""
SQLAlchemy-backed entry store.

One short-lived session per operation, so a single store instance can be
shared by the request threadpool and the scheduler thread. Link uniqueness is
enforced by the `entries.link` unique constraint.
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from feedkeeper.exceptions import StoreError
from feedkeeper.models import Entry
from feedkeeper.storage.base import (
    EntryFilter,
    EntryRecord,
    EntryStore,
    NormalizedEntry,
    is_membership,
    validate_fields,
)

logger = logging.getLogger(__name__)

# Max bound parameters per IN (...) clause; SQLite caps variables per statement
IN_CLAUSE_BATCH_SIZE = 500


def _batched(values: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    for start in range(0, len(values), size):
        yield values[start:start + size]


def _to_record(row: Entry) -> EntryRecord:
    return EntryRecord(
        title=row.title,
        link=row.link,
        description=row.description,
        publication_date=row.publication_date,
        posted=bool(row.posted),
    )


class SqlEntryStore(EntryStore):
    """
    Entry store on top of a SQLAlchemy session factory.

    Filters support equality on any entry field plus at most one membership
    field. Membership values are split into IN-clause batches; all batches of
    one call run in the same transaction.
    """

    def __init__(self, session_factory: sessionmaker | None = None, batch_size: int = IN_CLAUSE_BATCH_SIZE):
        if session_factory is None:
            from feedkeeper.database import SessionLocal

            session_factory = SessionLocal
        self._session_factory = session_factory
        self._batch_size = batch_size

    @property
    def name(self) -> str:
        return "sql"

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Session scope that maps driver errors to StoreError."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"Entry store operation failed: {e}") from e
        finally:
            session.close()

    def _split_filter(self, filter: EntryFilter | None):
        """Return (equality conditions, (column, values) or None)."""
        filter = filter or {}
        validate_fields(filter)

        conditions = []
        membership = None
        for field, value in filter.items():
            column = getattr(Entry, field)
            if is_membership(value):
                if membership is not None:
                    raise ValueError("Only one membership field per filter is supported")
                membership = (column, list(dict.fromkeys(value)))
            else:
                conditions.append(column == value)
        return conditions, membership

    def _where_batches(self, filter: EntryFilter | None) -> list[list]:
        """
        Expand a filter into one WHERE clause list per IN-clause batch.

        An empty membership set matches nothing and yields no batches.
        """
        conditions, membership = self._split_filter(filter)
        if membership is None:
            return [conditions]

        column, values = membership
        return [
            [*conditions, column.in_(batch)]
            for batch in _batched(values, self._batch_size)
        ]

    def find_one(self, link: str) -> EntryRecord | None:
        with self._session() as session:
            row = session.execute(select(Entry).where(Entry.link == link)).scalars().first()
            return _to_record(row) if row is not None else None

    def find_all(self, filter: EntryFilter | None = None) -> list[EntryRecord]:
        where_batches = self._where_batches(filter)
        rows: list[Entry] = []
        with self._session() as session:
            for where in where_batches:
                rows.extend(session.execute(select(Entry).where(*where)).scalars().all())
            rows.sort(key=lambda row: row.id)
            return [_to_record(row) for row in rows]

    def insert(self, entry: NormalizedEntry) -> bool:
        with self._session() as session:
            session.add(
                Entry(
                    title=entry["title"],
                    link=entry["link"],
                    description=entry["description"],
                    publication_date=entry["publication_date"],
                    posted=entry["posted"],
                )
            )
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                exists = session.execute(
                    select(Entry.id).where(Entry.link == entry["link"])
                ).first()
                if exists is None:
                    raise
                logger.debug(f"Insert lost race for existing link: {entry['link']}")
                return False
            return True

    def update_many(self, filter: EntryFilter, set_fields: Mapping[str, Any]) -> int:
        if not set_fields:
            raise ValueError("update_many requires at least one field to set")
        validate_fields(set_fields)

        # Rows that already hold the target values are not counted as modified
        unchanged_guard = [getattr(Entry, field) != value for field, value in set_fields.items()]

        where_batches = self._where_batches(filter)
        if not where_batches:
            return 0

        modified = 0
        with self._session() as session:
            for where in where_batches:
                result = session.execute(
                    update(Entry)
                    .where(*where, *unchanged_guard)
                    .values(**set_fields)
                    .execution_options(synchronize_session=False)
                )
                modified += result.rowcount
            session.commit()
        return modified

    def count(self, filter: EntryFilter | None = None) -> int:
        total = 0
        with self._session() as session:
            for where in self._where_batches(filter):
                total += session.execute(
                    select(func.count()).select_from(Entry).where(*where)
                ).scalar_one()
        return total
