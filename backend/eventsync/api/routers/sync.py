from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from eventsync.api.deps import get_engine, get_events_source
from eventsync.infra.db.tables import metadata
from eventsync.jobs.sync_events import build_runner
from eventsync.providers.events.base import EventsPageSource

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sync"])


@router.api_route("/sync", methods=["GET", "POST"])
def trigger_sync(
    request: Request,
    source: EventsPageSource = Depends(get_events_source),
):
    try:
        engine = get_engine(request)
        metadata.create_all(engine)
        result = build_runner(engine, provider=source).run()
    except Exception:
        logger.exception("Error syncing events")
        return JSONResponse(status_code=500, content={"error": "Failed to sync events"})
    return result.as_dict()
