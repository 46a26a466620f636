import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Optional
from urllib.parse import urlparse

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)


def sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    try:
        parsed = urlparse(url)
        if parsed.password:
            sanitized = parsed._replace(
                netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
            )
            return sanitized.geturl()
        return url
    except ValueError:
        return url


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Coerce a date-like value from an external document into a UTC datetime.

    Accepts datetime, date, or ISO-8601 strings. Anything else, including
    unparsable strings, yields None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str) and value.strip():
        try:
            return ensure_utc(date_parser.isoparse(value.strip()))
        except (ValueError, OverflowError) as e:
            logger.debug(f"Ignoring unparsable date {value!r}: {e}")
            return None
    return None
