"""Timestamp parsing for the heterogeneous layouts collectors emit.

Each layout pairs a strict shape (zero-padded fields, ``Z`` or a
``+HH:MM`` offset) with the strptime format that reads it. strptime
alone accepts unpadded fields and colon-less offsets.
"""

import re
from datetime import UTC, datetime

# Fractional seconds longer than microseconds (RFC3339 nano)
_FRACTION = re.compile(r"(\.\d{6})\d+")

_DATE_TIME = r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}"
_OFFSET = r"(?:Z|[+-]\d{2}:\d{2})"

RFC3339_SHAPE = re.compile(_DATE_TIME + r"(?:\.\d+)?" + _OFFSET)

RFC3339_LAYOUTS = (
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
)

# Tried in order; the first layout that parses wins.
TIMESTAMP_LAYOUTS = (
    ("rfc3339", re.compile(_DATE_TIME + _OFFSET), "%Y-%m-%dT%H:%M:%S%z"),
    ("rfc3339_millis_z", re.compile(_DATE_TIME + r"\.\d{3}Z"), "%Y-%m-%dT%H:%M:%S.%fZ"),
    ("datetime", re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}"), "%Y-%m-%d %H:%M:%S"),
    ("rfc3339_nano", RFC3339_SHAPE, "%Y-%m-%dT%H:%M:%S.%f%z"),
)


def _strptime(text: str, layout: str) -> datetime | None:
    try:
        parsed = datetime.strptime(text, layout)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _trim_fraction(text: str) -> str:
    return _FRACTION.sub(r"\1", text, count=1)


def parse_rfc3339(text: str) -> datetime | None:
    """Parse an RFC3339 timestamp, fractional seconds allowed.

    Returns:
        UTC datetime, or None if the text isn't RFC3339
    """
    if not text or not RFC3339_SHAPE.fullmatch(text):
        return None
    text = _trim_fraction(text)
    for layout in RFC3339_LAYOUTS:
        parsed = _strptime(text, layout)
        if parsed is not None:
            return parsed
    return None


def parse_timestamp(text: str) -> datetime | None:
    """Parse text against the known collector layouts in priority order.

    Layouts without an offset are read as UTC.

    Returns:
        UTC datetime, or None if no layout matches
    """
    if not text:
        return None
    for _name, shape, layout in TIMESTAMP_LAYOUTS:
        if not shape.fullmatch(text):
            continue
        candidate = _trim_fraction(text) if "%f" in layout else text
        parsed = _strptime(candidate, layout)
        if parsed is not None:
            return parsed
    return None


def to_unix_micros(value: datetime) -> int:
    """Microseconds since the Unix epoch."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    delta = value - datetime(1970, 1, 1, tzinfo=UTC)
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


def format_rfc3339(value: datetime) -> str:
    """Format as UTC RFC3339 without fractional seconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_millis(value: datetime) -> str:
    """Format as UTC ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
