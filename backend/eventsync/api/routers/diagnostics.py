from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from eventsync.api.deps import get_engine, get_events_source
from eventsync.domain.errors import UpstreamApiError
from eventsync.infra.db.events_repository import EventsRepository
from eventsync.providers.events.base import EventsPageSource
from eventsync.services.sync_orchestrator import compute_baseline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/test", tags=["diagnostics"])

ENDPOINTS = ["/test/db", "/test/api", "/test/all"]


@router.get("")
def list_checks():
    return {"available_endpoints": ENDPOINTS}


@router.get("/db")
def check_database(engine: Engine = Depends(get_engine)):
    return database_status(EventsRepository(engine))


@router.get("/api")
def check_api(source: EventsPageSource = Depends(get_events_source)):
    return api_status(source)


@router.get("/all")
def check_all(
    engine: Engine = Depends(get_engine),
    source: EventsPageSource = Depends(get_events_source),
):
    return {
        "database": database_status(EventsRepository(engine)),
        "api": api_status(source),
    }


def database_status(repo: EventsRepository) -> Dict[str, Any]:
    try:
        if not repo.table_exists():
            return {"success": False, "message": "The 'events' table does not exist in the database"}
        count = repo.count_events()
        sample = repo.sample_events(limit=1) if count else []
    except SQLAlchemyError as exc:
        logger.exception("Database check failed")
        return {"success": False, "message": str(exc)}
    return {
        "success": True,
        "message": "Database connection successful",
        "table_exists": True,
        "event_count": count,
        "sample_event": sample[0] if sample else None,
    }


def api_status(source: EventsPageSource) -> Dict[str, Any]:
    baseline = compute_baseline(None, datetime.now(timezone.utc).date())
    try:
        page = source.fetch_page(baseline=baseline, limit=1, offset=0)
    except UpstreamApiError as exc:
        logger.exception("API check failed")
        return {"success": False, "message": str(exc)}
    return {
        "success": True,
        "message": "API connection successful",
        "total_count": page.total_count,
        "sample_result": page.results[0] if page.results else None,
    }
