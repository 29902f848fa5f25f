# feedkeeper/routers/admin.py
"""
Operational endpoints.

POST /force-check - Run one feed check now
GET  /status      - Feed, scheduler and store summary
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from feedkeeper.config import get_settings
from feedkeeper.exceptions import FetchError, ParseError, StoreError
from feedkeeper.schemas.admin import IngestRunResponse, StatusResponse
from feedkeeper.services.ingestion import IngestionService, get_ingestion_service
from feedkeeper.storage.base import EntryStore
from feedkeeper.storage.factory import get_entry_store

admin_logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


@router.post("/force-check", response_model=IngestRunResponse)
def force_check(
    service: IngestionService = Depends(get_ingestion_service),
) -> IngestRunResponse:
    """
    Trigger a feed check outside the periodic schedule.

    Fetches the feed, parses it, and stores entries whose link is new.
    Runs synchronously and reports the failure if the run fails.
    """
    admin_logger.info("POST /force-check endpoint called.")
    try:
        result = service.ingest_once()
    except (FetchError, ParseError) as e:
        admin_logger.error(f"Manual check failed: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to check feed: {e}")
    except StoreError as e:
        admin_logger.error(f"Manual check failed: {e}")
        raise HTTPException(status_code=503, detail=f"Failed to check feed: {e}")

    return IngestRunResponse(
        status="completed",
        trace_id=result.trace_id,
        started_at=result.started_at,
        finished_at=result.finished_at,
        duration_ms=result.duration_ms,
        total_entries=result.total_entries,
        ingested=result.ingested,
        skipped_existing=result.skipped_existing,
    )


@router.get("/status", response_model=StatusResponse)
def get_status(
    request: Request,
    store: EntryStore = Depends(get_entry_store),
) -> StatusResponse:
    """Report configuration, last periodic run and entry counts."""
    settings = get_settings()
    scheduler = getattr(request.app.state, "scheduler", None)

    try:
        total_entries = store.count()
        unposted_entries = store.count({"posted": False})
    except StoreError as e:
        admin_logger.error(f"Status check failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    return StatusResponse(
        status="ok",
        feed_url=settings.FEED_URL,
        check_interval_seconds=settings.CHECK_INTERVAL_SECONDS,
        scheduler_running=scheduler.running if scheduler else False,
        total_entries=total_entries,
        unposted_entries=unposted_entries,
        last_run_at=scheduler.last_run_at if scheduler else None,
        last_run_status=scheduler.last_run_status if scheduler else None,
        last_error=scheduler.last_error if scheduler else None,
    )
