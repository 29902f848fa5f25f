"""
Pydantic schemas for API request/response validation.
"""

from feedkeeper.schemas.admin import IngestRunResponse, StatusResponse
from feedkeeper.schemas.entries import (
    EntryListResponse,
    EntryResponse,
    MarkPostedRequest,
    MarkPostedResponse,
)

__all__ = [
    "EntryListResponse",
    "EntryResponse",
    "IngestRunResponse",
    "MarkPostedRequest",
    "MarkPostedResponse",
    "StatusResponse",
]
