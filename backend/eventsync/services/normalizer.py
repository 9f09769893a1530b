from __future__ import annotations

import re
from typing import Any, Optional

from eventsync.domain.records import MULTI_VALUED_FIELDS, SCALAR_FIELDS, StoredEvent, classify
from eventsync.domain.slug import create_slug

EXTERNAL_EVENT_ID_PATTERN = re.compile(r"eventid%3d(\d+)")


def normalize_record(record: Any) -> StoredEvent:
    """Map one loosely-typed API record onto the stored event shape.

    Malformed input degrades to ``None`` fields, this never raises.
    """
    if not isinstance(record, dict):
        record = {}
    values: dict[str, Any] = {}
    for name in SCALAR_FIELDS:
        values[name] = _scalar(record.get(name))
    for name in MULTI_VALUED_FIELDS:
        values[name] = classify(record.get(name)).flatten()
    values["bookingsrequired"] = _booking_flag(record.get("bookingsrequired"))
    values["externaleventid"] = extract_external_event_id(
        record.get("web_link"), record.get("externaleventid")
    )
    values["slug"] = create_slug(values["subject"], values["location"])
    return StoredEvent(**values)


def extract_external_event_id(web_link: Any, fallback: Any = None) -> Optional[str]:
    if isinstance(web_link, str) and web_link:
        match = EXTERNAL_EVENT_ID_PATTERN.search(web_link)
        if match:
            return match.group(1)
    return _scalar(fallback)


def _scalar(value: Any) -> Optional[str]:
    if not value:
        return None
    if isinstance(value, str):
        return value
    return classify(value).flatten()


def _booking_flag(value: Any) -> Optional[int]:
    # Only native booleans count; the string "true" is left as unknown.
    if isinstance(value, bool):
        return 1 if value else 0
    return None