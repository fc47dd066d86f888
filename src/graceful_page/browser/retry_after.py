"""Interpretation of the HTTP Retry-After response header."""

import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime


def _parse_http_date(value: str) -> datetime | None:
    try:
        target = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        try:
            target = datetime.fromisoformat(value)
        except ValueError:
            return None

    if target.tzinfo is None:
        target = target.replace(tzinfo=timezone.utc)
    return target


def parse_retry_after(header_value: str | None, now: datetime | None = None) -> float | None:
    """Convert a Retry-After header value into a delay in milliseconds.

    Accepts both forms allowed by HTTP: delay-seconds (``"120"``) and an
    HTTP-date (``"Wed, 21 Oct 2015 07:28:00 GMT"``). A zero result is
    reported as ``None``, the same as a missing or unparseable header, so
    ``"0"`` never means "retry immediately". Dates in the past give a
    negative delay.

    Args:
        header_value: Raw header value, or None if the header is absent
        now: Reference time for HTTP-dates (default: current UTC time)

    Returns:
        Delay in milliseconds, or None when there is no usable hint
    """
    if not header_value:
        return None

    value = header_value.strip()

    # e.g. 120 (seconds)
    try:
        seconds = float(value)
    except ValueError:
        seconds = None
    if seconds is not None:
        if seconds and math.isfinite(seconds):
            return seconds * 1000
        return None

    # e.g. "Wed, 21 Oct 2015 07:28:00 GMT"
    target = _parse_http_date(value)
    if target is None:
        return None

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    diff = (target - now).total_seconds() * 1000
    return diff or None
