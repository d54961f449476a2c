#!/usr/bin/env python3
"""Parsing and validation of user-supplied target timestamps."""

import time
from datetime import datetime, timezone

from .errors import InvalidInput

# Accepted after "T" and a trailing "Z" / "+00:00" are normalised away
DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
)


def parse_timestamp(value: str) -> int:
    """Parse a Unix timestamp in seconds or an ISO-8601 date/time (UTC).

    Examples of accepted input: ``1750921805``, ``2025-06-26T10:21:08Z``,
    ``2025-06-26 10:21``, ``2025-06-26``.

    Raises:
        InvalidInput: If the value matches none of the supported formats
    """
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        pass

    cleaned = text.replace("T", " ").removesuffix("Z").removesuffix("+00:00")
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
        return int(parsed.replace(tzinfo=timezone.utc).timestamp())

    raise InvalidInput(
        f"Invalid timestamp format: '{value}'. Supported formats: "
        "Unix timestamp (1750921805), ISO 8601 (2025-06-26T10:21:08Z), "
        "date only (2025-06-26)"
    )


def ensure_not_future(timestamp: int, now: int | None = None) -> int:
    """Reject timestamps later than the current time."""
    now = int(time.time()) if now is None else now
    if timestamp > now:
        raise InvalidInput(f"Timestamp {timestamp} is in the future (now is {now})")
    return timestamp
