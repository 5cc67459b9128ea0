"""
Event normalizer for the form's separate date and time fields.
Splits stored "dateTtime" strings for editing and combines validated
date/time pairs back into them. Wall-clock only, no timezone handling.
"""

from datetime import datetime
from typing import Optional, Tuple

from dateutil import parser as dateutil_parser

from eventcal.errors import ValidationError
from eventcal.logging_helper import Log

_isoparser = dateutil_parser.isoparser()


def split_datetime(value: Optional[str]) -> Tuple[str, str]:
    """
    Split "2025-06-10T09:00" into ("2025-06-10", "09:00").
    A value without a time part gives an empty time; None gives two empty strings.
    """
    if not value:
        return "", ""
    date_part, _, time_part = value.partition("T")
    return date_part, time_part


def date_only(value) -> str:
    """Date part of a clicked cell (date, datetime, or ISO string)."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return split_datetime(str(value).strip())[0]


def normalize_date(date_str: str, field_name: str) -> str:
    """
    Validate an ISO date and return it as YYYY-MM-DD.

    Raises:
        ValidationError: if the date cannot be parsed
    """
    try:
        return _isoparser.parse_isodate(date_str.strip()).isoformat()
    except ValueError as e:
        Log.warn(f"Invalid date for {field_name}: '{date_str}' ({e})")
        raise ValidationError([field_name], f"Invalid date for {field_name}: {date_str}") from e


def normalize_time(time_str: str, field_name: str) -> str:
    """
    Validate a wall-clock time and return HH:MM (HH:MM:SS when seconds are set).

    Raises:
        ValidationError: if the time cannot be parsed
    """
    # The isoparser maps 24:00 to midnight of the same day
    if time_str.strip().startswith("24"):
        Log.warn(f"Invalid time for {field_name}: '{time_str}' (hour 24)")
        raise ValidationError([field_name], f"Invalid time for {field_name}: {time_str}")
    try:
        parsed = _isoparser.parse_isotime(time_str.strip())
    except ValueError as e:
        Log.warn(f"Invalid time for {field_name}: '{time_str}' ({e})")
        raise ValidationError([field_name], f"Invalid time for {field_name}: {time_str}") from e
    if parsed.second:
        return parsed.strftime("%H:%M:%S")
    return parsed.strftime("%H:%M")


def combine_datetime(date_str: str, time_str: str, prefix: str) -> str:
    """
    Combine a date and a time field into "YYYY-MM-DDTHH:MM".

    Args:
        prefix: "start" or "end", used to name the offending field on error
    """
    date_value = normalize_date(date_str, f"{prefix}_date")
    time_value = normalize_time(time_str, f"{prefix}_time")
    return f"{date_value}T{time_value}"


def ends_before_start(start: str, end: str) -> bool:
    """True when end is strictly earlier than start."""
    return _isoparser.isoparse(end) < _isoparser.isoparse(start)
