# feedkeeper/routers/entries.py
"""
Entry endpoints.

GET  /items              - List all stored entries
GET  /items/unposted     - List entries not yet marked posted
POST /items/mark-posted  - Mark a batch of entries as posted
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from feedkeeper.exceptions import StoreError
from feedkeeper.schemas.entries import (
    EntryListResponse,
    EntryResponse,
    MarkPostedRequest,
    MarkPostedResponse,
)
from feedkeeper.services.publication import PublicationService
from feedkeeper.storage.base import EntryRecord, EntryStore
from feedkeeper.storage.factory import get_entry_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/items", tags=["items"])


def get_publication_service(store: EntryStore = Depends(get_entry_store)) -> PublicationService:
    return PublicationService(store)


def _entry_list(records: list[EntryRecord]) -> EntryListResponse:
    return EntryListResponse(
        entries=[EntryResponse.model_validate(r) for r in records],
        total=len(records),
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.get("", response_model=EntryListResponse)
def list_items(
    service: PublicationService = Depends(get_publication_service),
) -> EntryListResponse:
    """List all stored entries."""
    try:
        records = service.list_all()
    except StoreError as e:
        logger.error(f"Failed to fetch items from the store: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    return _entry_list(records)


@router.get("/unposted", response_model=EntryListResponse)
def list_unposted_items(
    service: PublicationService = Depends(get_publication_service),
) -> EntryListResponse:
    """List entries that have not been posted yet."""
    try:
        records = service.list_unposted()
    except StoreError as e:
        logger.error(f"Failed to fetch unposted items from the store: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    return _entry_list(records)


@router.post("/mark-posted", response_model=MarkPostedResponse)
def mark_items_posted(
    request: MarkPostedRequest,
    service: PublicationService = Depends(get_publication_service),
) -> MarkPostedResponse:
    """
    Mark entries as posted.

    Unknown links are ignored and show up as a lower modified_count.
    """
    links = set(request.links)
    try:
        modified = service.mark_posted(links)
    except StoreError as e:
        logger.error(f"Failed to mark items as posted: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    return MarkPostedResponse(requested=len(links), modified_count=modified)
