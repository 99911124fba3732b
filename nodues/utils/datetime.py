# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for the No-Dues notifier.

Design Decisions:
-----------------
1. All timestamps are stored in UTC (PostgreSQL TIMESTAMPTZ)
2. All Python datetimes are timezone-aware (with timezone.utc)
3. Calendar dates shown to students are rendered in the configured
   local timezone (Asia/Kolkata by default)

Usage:
------
    from nodues.utils.datetime import utc_now, days_until

    remaining = days_until(fee.deadline, utc_now())
"""

import math
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

SECONDS_PER_DAY = 24 * 60 * 60


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def days_until(target: datetime, now: datetime) -> int:
    """Whole days from now until target, rounded up.

    A deadline 36 hours away is 2 days away; one already past yields
    zero or a negative number.

    Args:
        target: The deadline or end date.
        now: The reference time.

    Returns:
        Ceiling of the difference in days.
    """
    delta = ensure_utc(target) - ensure_utc(now)
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def local_date(dt: datetime, tz_name: str) -> date:
    """Calendar date of a datetime in the given timezone.

    Args:
        dt: Datetime to convert.
        tz_name: IANA timezone name.

    Returns:
        The local calendar date.
    """
    return ensure_utc(dt).astimezone(ZoneInfo(tz_name)).date()


def format_local_date(dt: datetime, tz_name: str) -> str:
    """Format a datetime as day/month/year in the given timezone.

    Matches the Indian short date style, without zero padding
    (e.g. 5/1/2026).

    Args:
        dt: Datetime to format.
        tz_name: IANA timezone name.

    Returns:
        Formatted date string.
    """
    day = local_date(dt, tz_name)
    return f"{day.day}/{day.month}/{day.year}"


def format_iso(dt: datetime | None) -> str | None:
    """Format a datetime as an ISO 8601 UTC string with a Z suffix.

    Args:
        dt: Datetime to format.

    Returns:
        String like 2026-10-18T04:30:00.000Z, or None.
    """
    if dt is None:
        return None

    dt_utc = ensure_utc(dt)
    return dt_utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")
