from __future__ import annotations

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.exc import OperationalError

from eventsync.infra.db.events_repository import EventsRepository
from eventsync.infra.db.tables import events_table, metadata
from eventsync.services.event_insert import EventInsertService
from eventsync.services.normalizer import normalize_record


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'event_insert.db'}", future=True)
    metadata.create_all(engine)
    return engine


def make_record(idx: int = 1, **overrides) -> dict:
    record = {
        "subject": f"Event {idx}",
        "location": "Brisbane Square Library",
        "start_datetime": f"2024-03-{10 + idx:02d}T09:30:00+00:00",
        "event_type": ["Family", "Free"],
        "bookingsrequired": True,
        "web_link": f"https://example.org/book?eventid%3d{1000 + idx}",
    }
    record.update(overrides)
    return record


def _count(engine) -> int:
    with engine.begin() as conn:
        return conn.execute(select(func.count()).select_from(events_table)).scalar()


def test_try_insert_new_event(engine):
    service = EventInsertService(EventsRepository(engine))
    outcome = service.try_insert(normalize_record(make_record()))
    assert outcome.inserted is True
    assert outcome.event_id is not None
    with engine.begin() as conn:
        row = conn.execute(select(events_table)).mappings().one()
    assert row["slug"] == "event-1-brisbane-square-library"
    assert row["event_type"] == "Family, Free"
    assert row["bookingsrequired"] == 1
    assert row["externaleventid"] == "1001"


def test_try_insert_never_updates(engine):
    service = EventInsertService(EventsRepository(engine))
    service.try_insert(normalize_record(make_record(description="first")))
    outcome = service.try_insert(normalize_record(make_record(description="second")))
    assert outcome.inserted is False
    with engine.begin() as conn:
        stored = conn.execute(select(events_table.c.description)).scalar_one()
    assert stored == "first"


def test_insert_batch_idempotent(engine):
    service = EventInsertService(EventsRepository(engine), batch_size=3)
    records = [make_record(i) for i in range(7)]
    assert service.insert_batch(records) == 7
    assert service.insert_batch(records) == 0
    assert _count(engine) == 7


def test_insert_batch_dedups_within_page(engine):
    service = EventInsertService(EventsRepository(engine))
    assert service.insert_batch([make_record(1), make_record(1), make_record(2)]) == 2
    assert _count(engine) == 2


def test_null_safe_dedup_matches_null_keys(engine):
    service = EventInsertService(EventsRepository(engine), null_safe=True)
    records = [{"subject": "Untitled", "location": None, "start_datetime": None}, {}]
    assert service.insert_batch(records) == 2
    assert service.insert_batch(records) == 0
    assert _count(engine) == 2


def test_strict_equality_reinserts_null_keys(engine):
    service = EventInsertService(EventsRepository(engine), null_safe=False)
    records = [{"subject": "Untitled", "location": None, "start_datetime": None}]
    service.insert_batch(records)
    assert service.insert_batch(records) == 1
    assert _count(engine) == 2


def test_null_safe_default_from_environment(engine, monkeypatch):
    monkeypatch.setenv("SYNC_NULL_SAFE_DEDUP", "false")
    assert EventInsertService(EventsRepository(engine)).null_safe is False
    monkeypatch.delenv("SYNC_NULL_SAFE_DEDUP")
    assert EventInsertService(EventsRepository(engine)).null_safe is True


class _FlakyRepository(EventsRepository):
    def __init__(self, engine, fail_subject: str):
        super().__init__(engine)
        self.fail_subject = fail_subject

    def insert_event(self, event):
        if event.subject == self.fail_subject:
            raise OperationalError("INSERT INTO events", {}, Exception("database is locked"))
        return super().insert_event(event)


def test_record_failure_does_not_abort_batch(engine):
    service = EventInsertService(_FlakyRepository(engine, fail_subject="Event 2"))
    saved = service.insert_batch([make_record(1), make_record(2), make_record(3)])
    assert saved == 2
    with engine.begin() as conn:
        subjects = conn.execute(select(events_table.c.subject).order_by(events_table.c.event_id)).scalars().all()
    assert subjects == ["Event 1", "Event 3"]


def test_invalid_batch_size(engine):
    with pytest.raises(ValueError):
        EventInsertService(EventsRepository(engine), batch_size=0)
