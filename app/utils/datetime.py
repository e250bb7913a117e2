"""Calendar helpers bound to the configured application timezone.

Residence expiry dates are plain dates; "today" depends on where HR works, so
every date comparison goes through the timezone configured by
``APP_TIMEZONE``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import get_settings

_FALLBACK_TIMEZONE: Final[str] = "Asia/Riyadh"
_UTC_OFFSET: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the timezone named by ``Settings.app_timezone``.

    IANA names and fixed offsets such as ``UTC+03:00`` are accepted; anything
    else resolves to Asia/Riyadh.
    """

    name = (get_settings().app_timezone or "").strip()
    return _resolve_timezone(name or _FALLBACK_TIMEZONE)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def today_in_app_timezone() -> date:
    """Calendar date used as the reference for days-until-expiry."""

    return now_in_app_timezone().date()


def now_in_app_naive_datetime() -> datetime:
    """Current local time without ``tzinfo``, the form stored in the database."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach (naive input) or convert (aware input) to the app timezone."""

    if value is None:
        return None
    app_tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=app_tz)
    return value.astimezone(app_tz)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Local wall-clock time of ``value`` with ``tzinfo`` stripped.

    SQLite ``DATETIME`` columns hold naive values; entities carry aware ones.
    """

    localized = ensure_app_timezone(value)
    return localized.replace(tzinfo=None) if localized is not None else None


def app_day_bounds(day: date) -> tuple[datetime, datetime]:
    """Naive ``[start, end)`` range covering ``day`` in stored local time."""

    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def _resolve_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        pass
    match = _UTC_OFFSET.match(name)
    if match is None:
        return ZoneInfo(_FALLBACK_TIMEZONE)
    offset = timedelta(
        hours=int(match.group("hours")), minutes=int(match.group("minutes") or 0)
    )
    return timezone(-offset if match.group("sign") == "-" else offset)
