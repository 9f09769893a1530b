from __future__ import annotations

import logging
import os
from typing import Optional
from urllib.parse import quote

import httpx

from eventsync.domain.errors import UpstreamApiError

from .base import EventsPage, EventsPageSource

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = (
    "https://data.brisbane.qld.gov.au/api/explore/v2.1/catalog/datasets/brisbane-city-council-events"
)


class BrisbaneEventsProvider(EventsPageSource):
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or os.getenv("EVENTS_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else float(os.getenv("EVENTS_API_TIMEOUT", "30"))
        self.transport = transport

    def build_url(self, *, baseline: str, limit: int, offset: int) -> str:
        encoded = quote(baseline, safe="")
        return (
            f"{self.base_url}/records?where=start_datetime%20%3E%3D%20%27{encoded}%27"
            f"&order_by=start_datetime&limit={limit}&offset={offset}"
        )

    def fetch_page(self, *, baseline: str, limit: int, offset: int) -> EventsPage:
        url = self.build_url(baseline=baseline, limit=limit, offset=offset)
        logger.info("Fetching events from %s", url)
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.get(url)
        except httpx.HTTPError as exc:
            raise UpstreamApiError(f"API request failed: {exc}") from exc
        if not resp.is_success:
            raise UpstreamApiError(
                f"API request failed: {resp.status_code} {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamApiError("API returned malformed JSON", status_code=resp.status_code) from exc
        return self._parse_page(data)

    @staticmethod
    def _parse_page(data) -> EventsPage:
        if not isinstance(data, dict):
            raise UpstreamApiError("API payload is not an object")
        results = data.get("results")
        if not isinstance(results, list):
            raise UpstreamApiError("API payload is missing 'results'")
        try:
            total_count = int(data.get("total_count") or 0)
        except (TypeError, ValueError) as exc:
            raise UpstreamApiError("API payload has an invalid 'total_count'") from exc
        return EventsPage(total_count=total_count, results=results)
