from __future__ import annotations

import logging
import os
from typing import Optional

import typer
from sqlalchemy.engine import Engine

from eventsync.infra.database import resolve_engine
from eventsync.infra.db.events_repository import EventsRepository
from eventsync.infra.db.tables import metadata
from eventsync.providers.events.base import EventsPageSource
from eventsync.providers.events.brisbane import BrisbaneEventsProvider
from eventsync.services.event_insert import EventInsertService
from eventsync.services.event_pager import EventPager
from eventsync.services.sync_orchestrator import EventSyncRunner

app = typer.Typer(help="Sync Brisbane City Council events into the events database")


def build_runner(
    engine: Engine,
    *,
    provider: Optional[EventsPageSource] = None,
    null_safe: Optional[bool] = None,
) -> EventSyncRunner:
    repository = EventsRepository(engine)
    insert_service = EventInsertService(repository, null_safe=null_safe)
    pager = EventPager(provider or BrisbaneEventsProvider(), insert_service)
    return EventSyncRunner(repository, pager)


def sync_events(
    *,
    engine=None,
    database_url: Optional[str] = None,
    provider: Optional[EventsPageSource] = None,
    null_safe: Optional[bool] = None,
) -> dict:
    engine = resolve_engine(engine, database_url)
    metadata.create_all(engine)
    runner = build_runner(engine, provider=provider, null_safe=null_safe)
    result = runner.run()
    _log_summary(result.as_dict(), runner.pager)
    return result.as_dict()


@app.command()
def run(
    database_url: Optional[str] = typer.Option(None, help="Database URL (defaults to DATABASE_URL)"),
    strict_equality: bool = typer.Option(
        False,
        "--strict-equality",
        help="Compare natural keys with plain = so NULL components never match",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every saved or skipped event"),
):
    """CLI entrypoint for the scheduled or on-demand events sync."""
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)
    result = sync_events(database_url=database_url, null_safe=False if strict_equality else None)
    typer.echo(result["message"])


def _log_summary(result: dict, pager: EventPager) -> None:
    db_url = os.getenv("DATABASE_URL", "<engine>")
    stats = pager.last_run
    print(
        f"[sync_events] db={db_url} pages={stats.pages} processed={stats.processed} "
        f"total={stats.total_count} saved={result['count']}"
    )


if __name__ == "__main__":
    app()
