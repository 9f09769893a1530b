from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from eventsync.api.routers import diagnostics, sync
from eventsync.providers.events.base import EventsPageSource


def create_app(engine: Optional[Engine] = None, provider: Optional[EventsPageSource] = None) -> FastAPI:
    app = FastAPI(title="Events Sync API", version="0.1.0")
    app.state.db_engine = engine
    app.state.events_source = provider

    app.include_router(sync.router)
    app.include_router(diagnostics.router)
    return app


app = create_app()
