"""
Reporting window -- validation of report date bounds and row limits.

Responsibility:
    Turns caller-supplied ``start`` / ``end`` values into a validated,
    UTC-normalized, inclusive ``DateWindow`` and resolves the best-clients
    row limit.  Pure functions, no I/O; selectors only ever see a
    ``DateWindow`` that has already passed validation.

Invariants enforced:
    - Both bounds are required and must parse as ISO-8601 dates or
      datetimes; otherwise InvalidDateRangeError.
    - ``start <= end``; otherwise InvalidDateRangeError.
    - Date-only bounds cover whole UTC days: ``start`` is midnight,
      ``end`` runs through 23:59:59.999999 of that day.
    - Naive datetimes are read as UTC; aware ones are converted to UTC.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any

from marketplace_kernel.exceptions import InvalidDateRangeError

DEFAULT_BEST_CLIENTS_LIMIT = 2
MAX_BEST_CLIENTS_LIMIT = 1000


@dataclass(frozen=True)
class DateWindow:
    """Inclusive ``[start, end]`` window over job payment dates."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= _to_utc(moment) <= self.end


def _to_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _parse_bound(value: Any, *, is_end: bool) -> datetime:
    """Parse one bound.  Raises ValueError when it is not a date."""
    if isinstance(value, datetime):
        return _to_utc(value)
    if isinstance(value, date):
        return datetime.combine(
            value, time.max if is_end else time.min, tzinfo=timezone.utc
        )
    if not isinstance(value, str):
        raise ValueError(f"Not a date: {value!r}")

    text = value.strip()
    if len(text) == 10:
        return _parse_bound(date.fromisoformat(text), is_end=is_end)
    return _to_utc(datetime.fromisoformat(text))


def parse_date_window(start: Any, end: Any) -> DateWindow:
    """
    Validate report bounds.

    Args:
        start: ISO date/datetime string, ``date`` or ``datetime``.
        end: ISO date/datetime string, ``date`` or ``datetime``.

    Returns:
        A UTC-normalized inclusive DateWindow.

    Raises:
        InvalidDateRangeError: If a bound is missing or unparsable, or if
            start is after end.
    """
    if start in (None, "") or end in (None, ""):
        raise InvalidDateRangeError(
            "Both start and end dates are required", start, end
        )

    try:
        start_at = _parse_bound(start, is_end=False)
        end_at = _parse_bound(end, is_end=True)
    except ValueError as exc:
        raise InvalidDateRangeError(
            "Invalid date format. Use YYYY-MM-DD", start, end
        ) from exc

    if start_at > end_at:
        raise InvalidDateRangeError(
            "Start date must be before end date", start, end
        )

    return DateWindow(start=start_at, end=end_at)


def resolve_limit(raw: Any, default: int = DEFAULT_BEST_CLIENTS_LIMIT) -> int:
    """
    Resolve the best-clients row limit.

    A positive int, or a string of ASCII digits naming one, overrides the
    default and is capped at MAX_BEST_CLIENTS_LIMIT.  Anything else
    (missing, non-numeric, zero, negative, bool) falls back to ``default``.
    """
    if isinstance(raw, bool):
        return default
    if isinstance(raw, str):
        text = raw.strip()
        if not (text.isascii() and text.isdigit()):
            return default
        digits = text.lstrip("0")
        if len(digits) > len(str(MAX_BEST_CLIENTS_LIMIT)):
            return MAX_BEST_CLIENTS_LIMIT
        raw = int(text)
    if not isinstance(raw, int) or raw <= 0:
        return default
    return min(raw, MAX_BEST_CLIENTS_LIMIT)
