from __future__ import annotations

import re
import unicodedata
from datetime import datetime, timezone
from typing import Any

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def clean_text(value: Any) -> str | None:
    """Trim JSON/form input; empty becomes None."""
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def parse_sort_order(value: Any) -> int:
    """Lenient integer parsing for sort_order fields; junk becomes 0."""
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return 0


def slugify(text: str) -> str:
    """
    "Getting Started: API keys" -> "getting-started-api-keys".
    Accents are folded to ASCII; returns "" when nothing usable remains.
    """
    folded = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    return _SLUG_STRIP.sub("-", folded.lower()).strip("-")[:200]


def parse_datetime(value: Any) -> datetime | None:
    """
    Accepts ISO 8601 ("2026-01-15", "2026-01-15T09:30:00", trailing "Z").
    Raises ValueError on anything else non-empty.
    """
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    # Stored naive UTC, like every other timestamp column.
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt
