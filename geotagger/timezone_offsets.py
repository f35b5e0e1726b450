# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Timezone offset utilities

Parses user supplied timezones into offsets from UTC and formats offsets
as EXIF OffsetTime strings.

Supported inputs:
- UTC designator: "Z"
- GMT offset: "+05:00", "-08:00"
- Abbreviation: "EST", "PST", "CET"
- IANA identifier: "America/New_York", "Europe/London"

Copyright 2025 DNAi inc.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil import tz

# Exact EXIF offset format: sign, two-digit hours, colon, two-digit minutes
OFFSET_PATTERN = re.compile(r'^([+-])(\d{2}):(\d{2})$')

# Minute components used by real-world timezones
VALID_OFFSET_MINUTES = (0, 15, 30, 45)

# Abbreviations resolved to a representative IANA zone
TIMEZONE_ABBREVIATIONS = {
    'UTC': 'UTC',
    'GMT': 'Etc/GMT',
    'BST': 'Europe/London',
    'WET': 'Europe/Lisbon',
    'CET': 'Europe/Paris',
    'CEST': 'Europe/Paris',
    'EET': 'Europe/Athens',
    'EEST': 'Europe/Athens',
    'MSK': 'Europe/Moscow',
    'IST': 'Asia/Kolkata',
    'PKT': 'Asia/Karachi',
    'ICT': 'Asia/Bangkok',
    'HKT': 'Asia/Hong_Kong',
    'SGT': 'Asia/Singapore',
    'JST': 'Asia/Tokyo',
    'KST': 'Asia/Seoul',
    'AEST': 'Australia/Sydney',
    'AEDT': 'Australia/Sydney',
    'ACST': 'Australia/Adelaide',
    'AWST': 'Australia/Perth',
    'NZST': 'Pacific/Auckland',
    'NZDT': 'Pacific/Auckland',
    'HST': 'Pacific/Honolulu',
    'AKST': 'America/Anchorage',
    'AKDT': 'America/Anchorage',
    'PST': 'America/Los_Angeles',
    'PDT': 'America/Los_Angeles',
    'MST': 'America/Denver',
    'MDT': 'America/Denver',
    'CST': 'America/Chicago',
    'CDT': 'America/Chicago',
    'EST': 'America/New_York',
    'EDT': 'America/New_York',
    'AST': 'America/Halifax',
    'ADT': 'America/Halifax',
    'NST': 'America/St_Johns',
    'NDT': 'America/St_Johns',
    'BRT': 'America/Sao_Paulo',
    'ART': 'America/Argentina/Buenos_Aires',
}


def parse_timezone_offset(value: str, at: Optional[datetime] = None) -> Optional[int]:
    """
    Parse a timezone string into an offset from UTC.

    Args:
        value: Timezone as "Z", "+HH:MM", abbreviation or IANA identifier
        at: Moment used to resolve daylight saving time (default: now)

    Returns:
        Offset in seconds east of UTC, or None if the value is not recognized
    """
    if value == 'Z':
        return 0

    match = OFFSET_PATTERN.match(value)
    if match:
        hours = int(match.group(2))
        minutes = int(match.group(3))
        if hours > 14 or minutes >= 60:
            return None
        total_seconds = hours * 3600 + minutes * 60
        return total_seconds if match.group(1) == '+' else -total_seconds

    zone_name = TIMEZONE_ABBREVIATIONS.get(value.upper(), value)
    # gettz also understands POSIX strings; only accept named zones here
    if not zone_name or zone_name[0] in '+-' or zone_name[0].isdigit():
        return None
    zone = tz.gettz(zone_name)
    if zone is None:
        return None

    moment = at or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    offset = moment.astimezone(zone).utcoffset()
    if offset is None:
        return None
    return int(offset.total_seconds())


def format_timezone_offset(seconds: int) -> str:
    """
    Format an offset from UTC as an EXIF OffsetTime string.

    Args:
        seconds: Offset in seconds east of UTC

    Returns:
        "Z" for UTC, otherwise "+HH:MM" or "-HH:MM"
    """
    if seconds == 0:
        return 'Z'
    sign = '+' if seconds >= 0 else '-'
    hours, remainder = divmod(abs(seconds), 3600)
    minutes = remainder // 60
    return f"{sign}{hours:02d}:{minutes:02d}"


def is_valid_timezone_offset(value: Optional[str]) -> bool:
    """
    Check whether a string can be written to EXIF OffsetTime fields.

    Valid values are "Z" or "+HH:MM"/"-HH:MM" with HH in 00..14 and MM one
    of 00, 15, 30, 45.
    """
    if not value:
        return False
    if value == 'Z':
        return True
    match = OFFSET_PATTERN.match(value)
    if not match:
        return False
    hours = int(match.group(2))
    minutes = int(match.group(3))
    return hours <= 14 and minutes in VALID_OFFSET_MINUTES


def offset_to_tzinfo(value: str) -> Optional[timezone]:
    """
    Convert an EXIF offset string into a tzinfo.

    Accepts any well-formed "+HH:MM" value (camera firmware writes offsets
    outside the writer's accepted set) as well as "Z".

    Returns:
        Fixed-offset timezone, or None if the string is not an offset
    """
    value = value.strip()
    if value == 'Z':
        return timezone.utc
    match = OFFSET_PATTERN.match(value)
    if not match:
        return None
    hours = int(match.group(2))
    minutes = int(match.group(3))
    if hours > 23 or minutes >= 60:
        return None
    delta = timedelta(hours=hours, minutes=minutes)
    return timezone(delta if match.group(1) == '+' else -delta)
