# feedkeeper/main.py

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from feedkeeper import __version__
from feedkeeper.config import get_settings
from feedkeeper.database import init_db
from feedkeeper.logging_config import configure_logging
from feedkeeper.routers import admin_router, entries_router
from feedkeeper.services.ingestion import get_ingestion_service
from feedkeeper.services.scheduler import FeedScheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(
        json_format=settings.LOG_JSON,
        level=settings.LOG_LEVEL,
        log_file=settings.LOG_FILE or None,
    )

    init_db()
    service = get_ingestion_service()

    scheduler = None
    if settings.SCHEDULER_ENABLED:
        scheduler = FeedScheduler(
            service.ingest_once,
            interval_seconds=settings.CHECK_INTERVAL_SECONDS,
            run_on_start=settings.CHECK_ON_STARTUP,
        )
        scheduler.start()
    else:
        logger.info("Periodic feed checker disabled")
    app.state.scheduler = scheduler

    logger.info(f"feedkeeper {__version__} ready, watching {settings.FEED_URL}")
    try:
        yield
    finally:
        if scheduler is not None:
            await scheduler.stop()
        service.client.close()
        get_ingestion_service.cache_clear()


app = FastAPI(title="feedkeeper", version=__version__, lifespan=lifespan)

app.include_router(admin_router)
app.include_router(entries_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict:
    return {"status": "ok", "service": "feedkeeper", "version": __version__}
