from __future__ import annotations

import datetime as dt
from typing import Optional, Tuple

UTC = dt.timezone.utc
EPOCH = dt.datetime(1970, 1, 1, tzinfo=UTC)


def now_millis() -> int:
    return int(dt.datetime.now(UTC).timestamp() * 1000)


def date_key_from_millis(value: int) -> str:
    """Return the UTC calendar day of an epoch-milliseconds timestamp as ``YYYY-MM-DD``.

    Raises ``ValueError`` when the timestamp falls outside the range a
    ``datetime`` can represent.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Timestamp must be an integer, got {value!r}")
    try:
        moment = EPOCH + dt.timedelta(milliseconds=value)
    except OverflowError as exc:
        raise ValueError(f"Timestamp out of range: {value}") from exc
    return moment.date().isoformat()


def iso_week_of(date_key: str) -> Optional[Tuple[int, int]]:
    """Return ``(iso_year, iso_week)`` for a ``YYYY-MM-DD`` key, or ``None`` if it does not parse."""
    try:
        day = dt.datetime.strptime(date_key, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None
    iso = day.isocalendar()
    return iso[0], iso[1]


def in_date_range(date_key: str, start: str, end: str) -> bool:
    # YYYY-MM-DD keys sort chronologically as plain strings
    return start <= date_key <= end
