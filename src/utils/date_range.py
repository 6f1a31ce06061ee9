"""Query-string date range parsing for admin reports."""
from __future__ import annotations

from datetime import datetime, time, timezone
from typing import Optional, Tuple

from src.services.errors import InvalidDateRangeError


def _strip(v: Optional[str]) -> str:
    return (v or "").strip()


def _parse(value: Optional[str], field: str, *, end_of_day: bool) -> datetime:
    raw = _strip(value)
    if not raw:
        raise InvalidDateRangeError(f"{field} is required")
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise InvalidDateRangeError(f"{field} must be an ISO-8601 date or datetime") from None
    # Stored timestamps are naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    if end_of_day and len(raw) == 10:
        parsed = datetime.combine(parsed.date(), time.max)
    return parsed


def parse_date_range(start: Optional[str], end: Optional[str]) -> Tuple[datetime, datetime]:
    """Return an inclusive (start, end) pair; a date-only end covers the whole day."""
    start_dt = _parse(start, "start", end_of_day=False)
    end_dt = _parse(end, "end", end_of_day=True)
    if start_dt > end_dt:
        raise InvalidDateRangeError("start must not be after end")
    return start_dt, end_dt
