from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, insert, inspect, literal, select
from sqlalchemy.engine import Engine

from eventsync.domain.records import NaturalKey, StoredEvent

from .tables import events_table

NATURAL_KEY_COLUMNS = ("subject", "location", "start_datetime")


class EventsRepository:
    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine is required")
        self.engine = engine

    def count_matching(self, key: NaturalKey, *, null_safe: bool = True) -> int:
        """Count stored rows sharing ``key``.

        With ``null_safe`` a ``None`` component matches a stored NULL (SQL ``IS``).
        Otherwise every component is compared with a bound ``=``, so keys with a
        ``None`` component never match anything.
        """
        conditions = []
        for name, value in zip(NATURAL_KEY_COLUMNS, key):
            column = events_table.c[name]
            if null_safe and value is None:
                conditions.append(column.is_(None))
            else:
                conditions.append(column == literal(value, type_=column.type))
        stmt = select(func.count()).select_from(events_table).where(*conditions)
        with self.engine.begin() as conn:
            return conn.execute(stmt).scalar_one()

    def insert_event(self, event: StoredEvent) -> int:
        with self.engine.begin() as conn:
            result = conn.execute(insert(events_table).values(**event.as_row()))
            return result.inserted_primary_key[0]

    def latest_start_datetime(self) -> Optional[str]:
        stmt = select(events_table.c.start_datetime).order_by(events_table.c.event_id.desc()).limit(1)
        with self.engine.begin() as conn:
            return conn.execute(stmt).scalar_one_or_none()

    def table_exists(self) -> bool:
        return inspect(self.engine).has_table(events_table.name)

    def count_events(self) -> int:
        with self.engine.begin() as conn:
            return conn.execute(select(func.count()).select_from(events_table)).scalar_one()

    def sample_events(self, limit: int = 5) -> List[Dict[str, Any]]:
        stmt = select(events_table).order_by(events_table.c.event_id.desc()).limit(limit)
        with self.engine.begin() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [dict(row) for row in rows]
