# feedkeeper/schemas/admin.py
"""
Schemas for the on-demand check and status endpoints.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class IngestRunResponse(BaseModel):
    """Response from an on-demand feed check."""

    status: str = Field("completed", description="completed")
    trace_id: str
    started_at: datetime
    finished_at: datetime
    duration_ms: int

    # Results
    total_entries: int = Field(..., description="Entries found in the feed")
    ingested: int = Field(..., description="Entries stored for the first time")
    skipped_existing: int = Field(..., description="Entries whose link was already stored")


class StatusResponse(BaseModel):
    """Service status."""

    status: str = "ok"
    feed_url: str
    check_interval_seconds: int
    scheduler_running: bool = False
    total_entries: int = 0
    unposted_entries: int = 0
    last_run_at: datetime | None = None
    last_run_status: str | None = None
    last_error: str | None = None
