from __future__ import annotations

from fastapi import HTTPException, Request
from sqlalchemy.engine import Engine

from eventsync.infra.database import resolve_engine
from eventsync.providers.events.base import EventsPageSource
from eventsync.providers.events.brisbane import BrisbaneEventsProvider


def get_engine(request: Request) -> Engine:
    engine = getattr(request.app.state, "db_engine", None)
    if engine is None:
        try:
            engine = resolve_engine()
        except RuntimeError as exc:
            raise HTTPException(status_code=500, detail="Database engine not configured") from exc
        request.app.state.db_engine = engine
    return engine


def get_events_source(request: Request) -> EventsPageSource:
    provider = getattr(request.app.state, "events_source", None)
    if provider is None:
        provider = BrisbaneEventsProvider()
        request.app.state.events_source = provider
    return provider
