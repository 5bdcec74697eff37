"""Timezone utilities for the signup report.

Every signup timestamp in the dataset is recorded in US Eastern time,
regardless of where the person signing up lives. This module turns such a
reference-zone timestamp into the local hour-of-day at the signup location.

Reference wall-clock times that do not map to exactly one instant (the
spring-forward gap and the fall-back overlap) are rejected with
``AmbiguousLocalTime``. The converted instant always has a single local
wall-clock time, so the target side needs no such check.
"""

import re
from datetime import datetime
from functools import lru_cache
from typing import Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import structlog

from .errors import AmbiguousLocalTime, ParseError, TimezoneUnresolved

logger = structlog.get_logger()

# Timezone constants
REFERENCE_TZ = ZoneInfo("America/New_York")  # US Eastern Standard/Daylight Time
UTC_TZ = ZoneInfo("UTC")

# M/D/YYYY H:MM, 24-hour clock; the minute part is optional
_DATE_HOUR_RX = re.compile(
    r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})\s+(\d{1,2})(?::(\d{2}))?\s*$"
)

TzLike = Union[str, ZoneInfo]


def parse_date_hour(text: str) -> datetime:
    """Parse a ``M/D/YYYY H:MM`` field into a naive datetime.

    Args:
        text: Date and hour text, e.g. ``"3/15/2019 14:00"`` or ``"3/15/2019 9"``

    Returns:
        Naive datetime with the parsed wall-clock time

    Raises:
        ParseError: If the text does not match the format or names an
            impossible date or time
    """
    if not isinstance(text, str):
        raise ParseError(repr(text), "not a text value")

    match = _DATE_HOUR_RX.match(text)
    if not match:
        raise ParseError(text)

    month, day, year, hour, minute = match.groups()
    try:
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute) if minute else 0
        )
    except ValueError as e:
        raise ParseError(text, str(e)) from e


@lru_cache(maxsize=None)
def _zone_for_key(key: str) -> ZoneInfo:
    return ZoneInfo(key)


def get_zone(tz: TzLike) -> ZoneInfo:
    """Look up an IANA zone.

    Raises:
        TimezoneUnresolved: If the identifier is unknown to the tz database
    """
    if isinstance(tz, ZoneInfo):
        return tz
    try:
        return _zone_for_key(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise TimezoneUnresolved(f"Unknown timezone {tz!r}") from e


def is_unique_wall_time(wall: datetime, tz: ZoneInfo) -> bool:
    """Check that a naive wall-clock time names exactly one instant in ``tz``.

    In a gap or an overlap the two folds carry different UTC offsets.
    """
    earlier = wall.replace(tzinfo=tz, fold=0)
    later = wall.replace(tzinfo=tz, fold=1)
    return earlier.utcoffset() == later.utcoffset()


def localize_reference(wall: datetime, reference_tz: TzLike = REFERENCE_TZ) -> datetime:
    """Attach the reference timezone to a naive wall-clock time.

    Raises:
        AmbiguousLocalTime: If the wall-clock time falls in a DST gap or
            overlap of the reference zone
    """
    tz = get_zone(reference_tz)
    if not is_unique_wall_time(wall, tz):
        raise AmbiguousLocalTime(
            f"{wall.isoformat()} has no unique instant in {tz.key}"
        )
    return wall.replace(tzinfo=tz)


def to_local(instant: datetime, target_tz: TzLike) -> datetime:
    """Convert an aware instant to wall-clock time in ``target_tz``.

    Raises:
        TimezoneUnresolved: If the target zone is unknown
    """
    if instant.tzinfo is None:
        raise ValueError("instant must be timezone-aware")
    return instant.astimezone(get_zone(target_tz))


def local_hour_of_day(
    date_hour_text: str,
    timezone_id: TzLike,
    reference_tz: TzLike = REFERENCE_TZ
) -> int:
    """Get the local hour (0-23) at which a reference-zone timestamp occurred.

    Minutes are truncated, so 08:30 and 08:00 local both give hour 8.

    Args:
        date_hour_text: Timestamp text recorded in the reference timezone
        timezone_id: IANA zone of the signup location
        reference_tz: Zone the timestamp was recorded in

    Raises:
        ParseError: Malformed timestamp text
        TimezoneUnresolved: Unknown target zone
        AmbiguousLocalTime: No unique wall-clock representation
    """
    wall = parse_date_hour(date_hour_text)
    instant = localize_reference(wall, reference_tz)
    local = to_local(instant, timezone_id)

    log_timezone_conversion(
        "reference to local",
        reference=instant.isoformat(),
        utc=instant.astimezone(UTC_TZ).isoformat(),
        local=local.isoformat(),
    )

    return local.hour


def log_timezone_conversion(operation: str, **kwargs) -> None:
    """Log timezone conversion operations for debugging.

    Args:
        operation: Description of the operation being performed
        **kwargs: Additional logging data
    """
    logger.debug(f"Timezone conversion: {operation}", **kwargs)
