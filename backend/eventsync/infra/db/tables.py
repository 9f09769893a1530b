from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, Table, Text

from eventsync.domain.records import EVENT_COLUMNS

metadata = MetaData()

_INTEGER_COLUMNS = {"bookingsrequired"}
_REQUIRED_COLUMNS = {"slug"}

events_table = Table(
    "events",
    metadata,
    Column("event_id", Integer, primary_key=True, autoincrement=True),
    *[
        Column(
            name,
            Integer if name in _INTEGER_COLUMNS else Text,
            nullable=name not in _REQUIRED_COLUMNS,
        )
        for name in EVENT_COLUMNS
    ],
)
