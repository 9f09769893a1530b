from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from eventsync.api.main import create_app
from eventsync.domain.errors import UpstreamApiError
from eventsync.infra.db.tables import metadata
from eventsync.providers.events.base import EventsPage


class FakeEventsSource:
    def __init__(self, records: list[dict] | None = None, fail: bool = False):
        self.records = records or []
        self.fail = fail

    def fetch_page(self, *, baseline: str, limit: int, offset: int) -> EventsPage:
        if self.fail:
            raise UpstreamApiError("API request failed: 500 upstream exploded", status_code=500)
        return EventsPage(total_count=len(self.records), results=self.records[offset : offset + limit])


SAMPLE_RECORDS = [
    {
        "subject": "Movie Night!",
        "location": "City Hall",
        "start_datetime": "2024-03-10T14:00:00+00:00",
        "bookingsrequired": False,
    },
    {
        "subject": "Storytime",
        "location": "Ashgrove Library",
        "start_datetime": "2024-03-11T09:30:00+00:00",
        "libraryeventtypes": ["Children", "Storytime"],
    },
]


def _build_api_client(tmp_path, source: FakeEventsSource, *, create_tables: bool = True):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'api_tests.db'}",
        connect_args={"check_same_thread": False},
        future=True,
    )
    if create_tables:
        metadata.create_all(engine)
    app = create_app(engine=engine, provider=source)
    with TestClient(app) as client:
        client.engine = engine
        yield client
    metadata.drop_all(engine)


@pytest.fixture()
def api_client(tmp_path):
    yield from _build_api_client(tmp_path, FakeEventsSource(SAMPLE_RECORDS))


@pytest.fixture()
def failing_api_client(tmp_path):
    yield from _build_api_client(tmp_path, FakeEventsSource(fail=True))


@pytest.fixture()
def empty_db_client(tmp_path):
    yield from _build_api_client(tmp_path, FakeEventsSource(SAMPLE_RECORDS), create_tables=False)


@pytest.fixture()
def unconfigured_api_client(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    app = create_app(engine=None, provider=FakeEventsSource(SAMPLE_RECORDS))
    with TestClient(app) as client:
        yield client
