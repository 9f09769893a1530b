from __future__ import annotations

import logging
from dataclasses import dataclass

from eventsync.providers.events.base import EventsPageSource

from .event_insert import EventInsertService

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


@dataclass
class PagerStats:
    pages: int = 0
    processed: int = 0
    saved: int = 0
    total_count: int = 0


class EventPager:
    def __init__(self, source: EventsPageSource, insert_service: EventInsertService, *, page_size: int = PAGE_SIZE):
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.source = source
        self.insert_service = insert_service
        self.page_size = page_size
        self.last_run = PagerStats()

    def fetch_and_save_all(self, baseline: str) -> int:
        """Walk every page from ``baseline`` onwards, persisting each before the next fetch.

        Stops once the processed count reaches the upstream ``total_count`` or a page
        comes back empty. API errors propagate; rows saved from earlier pages stay.
        """
        stats = PagerStats()
        self.last_run = stats
        offset = 0
        while True:
            page = self.source.fetch_page(baseline=baseline, limit=self.page_size, offset=offset)
            stats.pages += 1
            stats.total_count = page.total_count
            if not page.results:
                break
            stats.saved += self.insert_service.insert_batch(page.results)
            stats.processed += len(page.results)
            offset += self.page_size
            if stats.processed >= stats.total_count:
                break
        logger.info(
            "Fetched %d pages, processed %d/%d records, saved %d",
            stats.pages,
            stats.processed,
            stats.total_count,
            stats.saved,
        )
        return stats.saved
