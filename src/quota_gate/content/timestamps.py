"""Timestamp normalization for content documents."""

from datetime import date, datetime, time, timezone
from typing import Any

_CONVERTERS = ("to_datetime", "ToDatetime", "toDate")


def normalize_timestamp(value: Any) -> datetime | None:
    """Coerce a stored timestamp to an aware UTC ``datetime``.

    Accepts native datetimes (naive values are taken as UTC), dates, wrapper
    objects exposing ``to_datetime()``/``ToDatetime()``/``toDate()``, ISO-8601
    strings and epoch seconds. ``None`` passes through.

    Raises:
        TypeError: For any other representation.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return normalize_timestamp(datetime.fromisoformat(text))
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    for name in _CONVERTERS:
        converter = getattr(value, name, None)
        if callable(converter):
            return normalize_timestamp(converter())
    raise TypeError(f"Unsupported timestamp representation: {type(value).__name__}")
