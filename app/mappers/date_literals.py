"""Conversion of translator date literals into native datetimes."""

import logging
import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DATE_MARKER = "$dateFromString"

# "+05:30", "-0800", "+05"
OFFSET_PATTERN = re.compile(r"^([+-])(\d{2}):?(\d{2})?$")


def resolve_timezone(name: Any) -> tzinfo:
    """
    Resolve a $dateFromString timezone (Olson name or UTC offset).

    Missing or unknown values resolve to UTC.
    """
    if not isinstance(name, str) or not name.strip():
        return timezone.utc

    text = name.strip()
    if text.upper() in ("UTC", "Z", "GMT"):
        return timezone.utc

    match = OFFSET_PATTERN.match(text)
    if match:
        sign, hours, minutes = match.groups()
        offset = timedelta(hours=int(hours), minutes=int(minutes or 0))
        return timezone(-offset if sign == "-" else offset)

    try:
        return ZoneInfo(text)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.warning(f"Unknown timezone {name!r} in date literal, using UTC")
        return timezone.utc


def parse_date_string(value: Any, tz: Any = None) -> Optional[datetime]:
    """
    Parse an ISO-8601 string into an aware datetime.

    A trailing "Z" is accepted. Naive values are taken in the given timezone
    (UTC when absent); an explicit offset in the string wins over it.

    Returns:
        datetime, or None if the value is not a parseable string
    """
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.warning(f"Unparseable date literal: {value!r}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=resolve_timezone(tz))
    return parsed


def normalize_dates(value: Any) -> Any:
    """
    Replace every {"$dateFromString": {"dateString": ...}} node with a datetime.

    Returns a structural copy; maps and lists are rebuilt, scalars are passed
    through. Nodes with a missing or unparseable dateString are kept as they are.
    """
    if isinstance(value, list):
        return [normalize_dates(item) for item in value]

    if isinstance(value, dict):
        marker = value.get(DATE_MARKER)
        if isinstance(marker, dict) and "dateString" in marker:
            parsed = parse_date_string(marker["dateString"], marker.get("timezone"))
            if parsed is not None:
                return parsed
        return {key: normalize_dates(item) for key, item in value.items()}

    return value
