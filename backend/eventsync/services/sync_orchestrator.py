from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date, datetime, timezone
from typing import Callable, Optional

from eventsync.infra.db.events_repository import EventsRepository

from .event_pager import EventPager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    success: bool
    message: str
    count: int

    def as_dict(self) -> dict:
        return asdict(self)


def compute_baseline(latest_start: Optional[str], today: date) -> str:
    if latest_start:
        day = latest_start.split("T")[0]
    else:
        day = today.isoformat()
    return f"{day}T00:00:00+00:00"


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class EventSyncRunner:
    def __init__(
        self,
        repository: EventsRepository,
        pager: EventPager,
        *,
        today: Optional[Callable[[], date]] = None,
    ):
        self.repository = repository
        self.pager = pager
        self.today = today or _utc_today

    def baseline(self) -> str:
        return compute_baseline(self.repository.latest_start_datetime(), self.today())

    def run(self) -> SyncResult:
        try:
            baseline = self.baseline()
            logger.info("Syncing events from baseline %s", baseline)
            saved = self.pager.fetch_and_save_all(baseline)
        except Exception:
            logger.exception("Error in events sync")
            raise
        return SyncResult(success=True, message=f"Successfully synced {saved} events", count=saved)
