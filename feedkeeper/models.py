# feedkeeper/models.py
"""
Database models.

Tables:
- Entry: one feed item, keyed by its link. Only `posted` changes after insert.
"""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, Text

from feedkeeper.database import Base


class Entry(Base):
    """A feed item as first seen. `link` is the identity key."""
    __tablename__ = "entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False, default="")
    link = Column(Text, nullable=False, unique=True)  # identity key
    description = Column(Text, nullable=False, default="")
    publication_date = Column(Text, nullable=False, default="")  # verbatim from the feed
    posted = Column(Boolean, nullable=False, default=False)
    ingested_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_entries_posted", "posted"),
    )

    def __repr__(self) -> str:
        return f"<Entry {self.id} {self.link!r} posted={self.posted}>"
