from __future__ import annotations

import re
from typing import Optional

_DISALLOWED = re.compile(r"[^A-Za-z0-9_\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def normalize_for_url(value: Optional[str]) -> str:
    normalized = _DISALLOWED.sub("", value or "")
    normalized = _WHITESPACE.sub("-", normalized)
    normalized = _HYPHENS.sub("-", normalized)
    normalized = normalized.strip("-")
    return normalized or "unknown"


def create_slug(subject: Optional[str], location: Optional[str]) -> str:
    """Build a URL-friendly, non-unique identifier from subject and location."""
    subject_slug = normalize_for_url((subject or "").strip().lower())
    location_slug = normalize_for_url((location or "").strip().lower())
    return f"{subject_slug}-{location_slug}".lower()
