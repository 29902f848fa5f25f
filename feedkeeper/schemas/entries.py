# feedkeeper/schemas/entries.py
"""
Schemas for entry listing and the mark-posted workflow.
"""

from pydantic import BaseModel, ConfigDict, Field


class EntryResponse(BaseModel):
    """A stored feed entry."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    link: str
    description: str
    publication_date: str
    posted: bool


class EntryListResponse(BaseModel):
    """List of entries."""

    entries: list[EntryResponse]
    total: int


class MarkPostedRequest(BaseModel):
    """Request to mark a batch of entries as posted."""

    links: list[str] = Field(default_factory=list, description="Links of the entries to mark posted")


class MarkPostedResponse(BaseModel):
    """Result of a mark-posted call."""

    requested: int = Field(..., description="Distinct links in the request")
    modified_count: int = Field(..., description="Entries that changed from unposted to posted")
