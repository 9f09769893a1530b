import json
from typing import Optional

import typer

from eventsync.domain.slug import create_slug
from eventsync.infra.database import resolve_engine
from eventsync.infra.db.events_repository import EventsRepository
from eventsync.jobs import sync_events as sync_job

app = typer.Typer(help="CLI for operating the events sync")

app.command("sync")(sync_job.run)


@app.command("slug")
def cli_slug(
    subject: Optional[str] = typer.Option(None, help="Event subject"),
    location: Optional[str] = typer.Option(None, help="Event location"),
):
    typer.echo(create_slug(subject, location))


@app.command("status")
def cli_status(
    database_url: Optional[str] = typer.Option(None, help="Database URL (defaults to DATABASE_URL)"),
):
    repo = EventsRepository(resolve_engine(database_url=database_url))
    if not repo.table_exists():
        typer.echo("The 'events' table does not exist in the database")
        raise typer.Exit(code=1)
    payload = {
        "event_count": repo.count_events(),
        "latest_start_datetime": repo.latest_start_datetime(),
    }
    typer.echo(json.dumps(payload))


if __name__ == "__main__":
    app()
