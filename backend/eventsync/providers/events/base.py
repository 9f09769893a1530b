from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class EventsPage:
    total_count: int
    results: list[dict[str, Any]] = field(default_factory=list)


class EventsPageSource(Protocol):
    """Contract for the paginated upstream events API."""

    def fetch_page(self, *, baseline: str, limit: int, offset: int) -> EventsPage:
        """Fetch one page of records whose ``start_datetime`` is >= ``baseline``.

        Results are ordered by ``start_datetime`` ascending. Implementations raise
        ``UpstreamApiError`` on any transport or payload failure.
        """
        raise NotImplementedError
