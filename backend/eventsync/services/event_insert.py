from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from eventsync.domain.errors import RecordInsertError
from eventsync.domain.records import StoredEvent
from eventsync.infra.db.events_repository import EventsRepository

from .normalizer import normalize_record

logger = logging.getLogger(__name__)

INSERT_BATCH_SIZE = 20


def null_safe_dedup_default() -> bool:
    return os.getenv("SYNC_NULL_SAFE_DEDUP", "true").strip().lower() not in {"0", "false", "no", "off"}


@dataclass(frozen=True)
class InsertOutcome:
    inserted: bool
    event_id: Optional[int] = None


class EventInsertService:
    """Insert-if-absent by natural key. Existing rows are never updated."""

    def __init__(
        self,
        repository: EventsRepository,
        *,
        batch_size: int = INSERT_BATCH_SIZE,
        null_safe: Optional[bool] = None,
    ):
        if repository is None:
            raise ValueError("repository is required")
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.repository = repository
        self.batch_size = batch_size
        self.null_safe = null_safe_dedup_default() if null_safe is None else null_safe

    def try_insert(self, candidate: StoredEvent) -> InsertOutcome:
        key = candidate.natural_key
        try:
            existing = self.repository.count_matching(key, null_safe=self.null_safe)
            if existing:
                logger.info("Event already exists: %s | %s | %s", *key)
                return InsertOutcome(inserted=False)
            event_id = self.repository.insert_event(candidate)
        except SQLAlchemyError as exc:
            raise RecordInsertError(f"Error saving event {candidate.subject}: {exc}", natural_key=key) from exc
        logger.info("Saved event: %s | %s | %s | Slug: %s", *key, candidate.slug)
        return InsertOutcome(inserted=True, event_id=event_id)

    def insert_batch(self, records: Iterable[Any]) -> int:
        """Normalize and insert a page of raw API records; returns how many were saved."""
        record_list = list(records)
        saved = 0
        for start in range(0, len(record_list), self.batch_size):
            candidates = [normalize_record(record) for record in record_list[start : start + self.batch_size]]
            for candidate in candidates:
                try:
                    outcome = self.try_insert(candidate)
                except RecordInsertError:
                    logger.exception("Skipping event %s", candidate.natural_key)
                    continue
                if outcome.inserted:
                    saved += 1
        return saved
