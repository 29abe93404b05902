"""Parse and validate query date windows."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Optional, Union

from ..exceptions import InvalidRange

DateLike = Union[str, date, datetime, None]


def to_utc(value: DateLike, label: str) -> Optional[datetime]:
    """Normalise a boundary to an aware UTC datetime.

    Strings are ISO-8601 dates (``2025-01-31``) or datetimes; plain dates
    mean midnight UTC; naive datetimes are taken as UTC.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            if len(text) == 10:
                parsed: Union[date, datetime] = date.fromisoformat(text)
            else:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise InvalidRange(f"malformed {label} date {value!r}, expected YYYY-MM-DD")
        value = parsed
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise InvalidRange(f"unsupported {label} value {value!r}")


def parse_range(start: DateLike, end: DateLike) -> tuple[Optional[datetime], Optional[datetime]]:
    """Validate a ``[start, end)`` window; either side may be open.

    Raises:
        InvalidRange: malformed boundary or start after end
    """
    since = to_utc(start, "from")
    until = to_utc(end, "to")
    if since is not None and until is not None and since > until:
        raise InvalidRange("from is after to", start, end)
    return since, until
