from __future__ import annotations

from typing import Optional


class EventSyncError(Exception):
    """Base error for the events sync pipeline."""


class UpstreamApiError(EventSyncError):
    """The events API failed or returned an unusable payload. Fatal for a run."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RecordInsertError(EventSyncError):
    """A single check/insert pair failed. Absorbed at record granularity."""

    def __init__(self, message: str, *, natural_key: tuple):
        super().__init__(message)
        self.natural_key = natural_key
