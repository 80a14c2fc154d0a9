"""RFC 2445 DATE / DATE-TIME token parsing and display formatting."""

from __future__ import annotations

import re
from datetime import datetime, timezone

DATE_TIME_REGEX = re.compile(r"[0-9]{8}(T[0-9]{6}Z?)?")

DATE_LENGTH = 8
UTC_DATE_TIME_LENGTH = 16


class DateFormatError(ValueError):
    """Raised when a token is not an RFC 2445 DATE or DATE-TIME."""


def is_all_day(token: str) -> bool:
    return len(token) == DATE_LENGTH


def parse_date(token: str) -> datetime:
    """Parse ``YYYYMMDD``, ``YYYYMMDDTHHMMSS`` or ``YYYYMMDDTHHMMSSZ``.

    Date-only tokens and local DATE-TIME tokens give naive (floating)
    datetimes. A trailing ``Z`` marks UTC; the value is converted to the
    local timezone and returned as an aware datetime.
    """

    if not DATE_TIME_REGEX.fullmatch(token):
        raise DateFormatError(f"no date format: {token!r}")

    try:
        value = datetime(int(token[0:4]), int(token[4:6]), int(token[6:8]))
        if len(token) == DATE_LENGTH:
            return value
        value = value.replace(
            hour=int(token[9:11]),
            minute=int(token[11:13]),
            second=int(token[13:15]),
        )
        if len(token) == UTC_DATE_TIME_LENGTH:
            # Conversion can leave the supported range near year 1 or 9999.
            value = value.replace(tzinfo=timezone.utc).astimezone()
    except (ValueError, OverflowError) as exc:
        raise DateFormatError(f"no date format: {token!r} ({exc})") from exc
    return value


def format_date(all_day: bool, value: datetime | None) -> str | None:
    """Render a long date, or a long date and time, for display."""
    if value is None:
        return None
    long_date = f"{value:%A}, {value:%B} {value.day}, {value.year}"
    if all_day:
        return long_date
    hour = value.hour % 12 or 12
    return f"{long_date} {hour}:{value:%M:%S %p}"
