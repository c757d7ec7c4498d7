"""Parsing of single time points given in the formats the tools accept."""

from __future__ import annotations

import calendar
import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from enum import IntEnum


class Granularity(IntEnum):
    """How precisely a parsed time point was specified."""

    UNKNOWN = 0
    SECOND = 1
    MINUTE = 2
    HOUR = 3
    DAY = 4
    MONTH = 5
    QUARTER = 6
    YEAR = 7


MIN_YEAR = 1970
MAX_YEAR = 9999
MIN_TIMESTAMP = 1_000_000_000
MAX_TIMESTAMP = 253_402_300_799

_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)

_RELATIVE_RE = re.compile(r"([0-9]+)([hdwmy])")
_QUARTER_RE = re.compile(r"([0-9]{4})Q([1-4])")
_CLOCK_RE = re.compile(r"[0-9]{2}:[0-9]{2}")
_SIGNED_INT_RE = re.compile(r"[+-]?[0-9]+")
_RFC3339_RE = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2})"
    r"(?::([0-9]{2})(?:[.,]([0-9]+))?)?"
    r"(Z|[+-][0-9]{2}:[0-9]{2})"
)
_DURATION_PIECE_RE = re.compile(r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")
_UNIT_NANOS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_NANOS_PER_HOUR = 3600 * 1_000_000_000


class _Rejected(ValueError):
    """Raised internally when a string is not a supported time point."""


def _to_local(naive: datetime) -> datetime:
    """Attach the local time zone to a naive wall-clock time."""
    try:
        return naive.astimezone()
    except (OverflowError, OSError, ValueError):
        return naive.replace(tzinfo=datetime.now().astimezone().tzinfo)


def _as_local(moment: datetime) -> datetime:
    """Convert an aware datetime to local time where it can be represented."""
    try:
        return moment.astimezone()
    except (OverflowError, OSError, ValueError):
        return moment


def _local(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return _to_local(datetime(year, month, day, hour, minute, second))


def _start_of_day(naive: datetime) -> datetime:
    return _local(naive.year, naive.month, naive.day)


def _add_date(naive: datetime, years: int = 0, months: int = 0, days: int = 0) -> datetime:
    """Shift a wall-clock time, normalising overflowing days into the next month."""
    total = (naive.year + years) * 12 + (naive.month - 1) + months
    year, month_index = divmod(total, 12)
    first = naive.replace(year=year, month=month_index + 1, day=1)
    return first + timedelta(days=naive.day - 1 + days)


def _atoi(text: str) -> int:
    if not _SIGNED_INT_RE.fullmatch(text):
        raise _Rejected(text)
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise _Rejected(text)
    return value


def _is_digits(text: str) -> bool:
    return bool(text) and all("0" <= c <= "9" for c in text)


def _check_date(year: int, month: int, day: int) -> None:
    if not (MIN_YEAR <= year <= MAX_YEAR and 1 <= month <= 12 and 1 <= day <= 31):
        raise _Rejected(f"{year}-{month}-{day}")
    if day > calendar.monthrange(year, month)[1]:
        raise _Rejected(f"{year}-{month}-{day}")


def _parse_duration(text: str) -> int:
    """Parse a duration such as ``1h30m`` or ``90s`` into nanoseconds."""
    body = text
    negative = False
    if body[:1] in ("+", "-"):
        negative = body[0] == "-"
        body = body[1:]
    if body == "0":
        return 0
    if not body:
        raise _Rejected(text)
    total = Decimal(0)
    pos = 0
    while pos < len(body):
        piece = _DURATION_PIECE_RE.match(body, pos)
        if piece is None:
            raise _Rejected(text)
        try:
            total += Decimal(piece.group(1)) * _UNIT_NANOS[piece.group(2)]
        except InvalidOperation as exc:
            raise _Rejected(text) from exc
        pos = piece.end()
    nanos = int(total)
    if nanos > (_INT64_MAX + 1 if negative else _INT64_MAX):
        raise _Rejected(text)
    return -nanos if negative else nanos


def _parse_natural(word: str) -> tuple[datetime, Granularity] | None:
    now = datetime.now()
    if word == "now":
        return datetime.now().astimezone(), Granularity.SECOND
    if word == "today":
        return _start_of_day(now), Granularity.DAY
    if word == "yesterday":
        return _start_of_day(_add_date(now, days=-1)), Granularity.DAY
    if word in ("this-week", "last-week"):
        back = now.isoweekday() - 1 + (7 if word == "last-week" else 0)
        return _start_of_day(_add_date(now, days=-back)), Granularity.DAY
    if word == "this-month":
        return _local(now.year, now.month, 1), Granularity.MONTH
    if word == "last-month":
        previous = _add_date(now.replace(day=1), months=-1)
        return _local(previous.year, previous.month, 1), Granularity.MONTH
    if word == "this-year":
        return _local(now.year, 1, 1), Granularity.YEAR
    if word == "last-year":
        return _local(now.year - 1, 1, 1), Granularity.YEAR
    if word == "all":
        return datetime(1, 1, 1, tzinfo=timezone.utc), Granularity.YEAR
    return None


def _parse_relative(amount: str) -> tuple[datetime, Granularity]:
    if amount == "0d":
        return _start_of_day(datetime.now()), Granularity.DAY

    match = _RELATIVE_RE.fullmatch(amount)
    if match:
        num = _atoi(match.group(1))
        if num <= 0:
            raise _Rejected(amount)
        unit = match.group(2)
        if unit == "h":
            return datetime.now().astimezone() - timedelta(hours=num), Granularity.HOUR
        now = datetime.now()
        if unit == "d":
            return _to_local(_add_date(now, days=-num)), Granularity.DAY
        if unit == "w":
            return _to_local(_add_date(now, days=-num * 7)), Granularity.DAY
        if unit == "m":
            return _to_local(_add_date(now, months=-num)), Granularity.MONTH
        return _to_local(_add_date(now, years=-num)), Granularity.YEAR

    nanos = _parse_duration(amount)
    moment = datetime.now().astimezone() - timedelta(microseconds=nanos // 1000)
    hours = nanos / _NANOS_PER_HOUR
    if hours < 1:
        return moment, Granularity.SECOND
    if hours < 24:
        return moment, Granularity.HOUR
    return moment, Granularity.DAY


def _parse_date_clock(text: str) -> tuple[datetime, Granularity]:
    parts = text.split("/")
    if len(parts) != 2:
        raise _Rejected(text)
    date_part, clock_part = parts

    date_size = len(date_part.encode("utf-8"))
    if date_size == 8 and _is_digits(date_part):
        year, month, day = int(date_part[0:4]), int(date_part[4:6]), int(date_part[6:8])
    elif date_size == 10 and date_part.count("-") == 2:
        year, month, day = (_atoi(p) for p in date_part.split("-"))
    else:
        raise _Rejected(text)
    _check_date(year, month, day)

    if not _CLOCK_RE.fullmatch(clock_part):
        raise _Rejected(text)
    hour, minute = (int(p) for p in clock_part.split(":"))
    if hour > 23 or minute > 59:
        raise _Rejected(text)
    return _local(year, month, day, hour, minute), Granularity.MINUTE


def _parse_rfc3339(text: str) -> datetime | None:
    match = _RFC3339_RE.fullmatch(text)
    if match is None:
        return None
    year, month, day, hour, minute = (int(g) for g in match.group(1, 2, 3, 4, 5))
    second = int(match.group(6) or 0)
    micro = int((match.group(7) or "")[:6].ljust(6, "0"))
    zone = match.group(8)
    if zone == "Z":
        tz = timezone.utc
    else:
        zone_hours, zone_minutes = int(zone[1:3]), int(zone[4:6])
        if zone_hours > 23 or zone_minutes > 59:
            return None
        offset = timedelta(hours=zone_hours, minutes=zone_minutes)
        tz = timezone(-offset if zone[0] == "-" else offset)
    if second > 59:
        return None
    try:
        return datetime(year, month, day, hour, minute, second, micro, tzinfo=tz)
    except ValueError:
        return None


def _parse(text: str) -> tuple[datetime, Granularity]:
    if not text:
        raise _Rejected(text)
    text = text.strip()

    natural = _parse_natural(text.lower())
    if natural is not None:
        return natural

    if text.endswith("-ago"):
        return _parse_relative(text[: -len("-ago")])

    quarter = _QUARTER_RE.fullmatch(text)
    if quarter:
        year, number = int(quarter.group(1)), int(quarter.group(2))
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise _Rejected(text)
        return _local(year, (number - 1) * 3 + 1, 1), Granularity.QUARTER

    size = len(text.encode("utf-8"))
    digits = _is_digits(text)

    if size == 4 and digits:
        year = int(text)
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise _Rejected(text)
        return _local(year, 1, 1), Granularity.YEAR

    if (size == 6 and digits) or (size == 7 and text.count("-") == 1):
        if size == 6 and digits:
            year, month = int(text[0:4]), int(text[4:6])
        else:
            year_text, month_text = text.split("-")
            year, month = _atoi(year_text), _atoi(month_text)
        if not (MIN_YEAR <= year <= MAX_YEAR and 1 <= month <= 12):
            raise _Rejected(text)
        return _local(year, month, 1), Granularity.MONTH

    if size == 8 and digits:
        year, month, day = int(text[0:4]), int(text[4:6]), int(text[6:8])
        _check_date(year, month, day)
        return _local(year, month, day), Granularity.DAY
    if size == 10 and text.count("-") == 2:
        year, month, day = (_atoi(p) for p in text.split("-"))
        _check_date(year, month, day)
        return _local(year, month, day), Granularity.DAY

    if size == 12 and digits:
        year, month, day = int(text[0:4]), int(text[4:6]), int(text[6:8])
        hour, minute = int(text[8:10]), int(text[10:12])
        if hour > 23 or minute > 59:
            raise _Rejected(text)
        _check_date(year, month, day)
        return _local(year, month, day, hour, minute), Granularity.MINUTE

    if "/" in text:
        return _parse_date_clock(text)

    if size == 14 and digits:
        year, month, day = int(text[0:4]), int(text[4:6]), int(text[6:8])
        hour, minute, second = int(text[8:10]), int(text[10:12]), int(text[12:14])
        if hour > 23 or minute > 59 or second > 59:
            raise _Rejected(text)
        _check_date(year, month, day)
        return _local(year, month, day, hour, minute, second), Granularity.SECOND

    if digits:
        stamp = int(text)
        if not MIN_TIMESTAMP <= stamp <= MAX_TIMESTAMP:
            raise _Rejected(text)
        return _as_local(datetime.fromtimestamp(stamp, timezone.utc)), Granularity.SECOND

    if "T" in text and any(c in text for c in "Z+-"):
        moment = _parse_rfc3339(text)
        if moment is not None:
            return moment, Granularity.SECOND

    raise _Rejected(text)


def parse_time_point(text: str) -> tuple[datetime, Granularity]:
    """Parse a time point and report how precisely it was given.

    Accepts timestamps, dates (``20060102``, ``2006-01-02``), dates with a
    clock (``2006-01-02/15:04``), compact date-times, RFC 3339, relative
    times (``5h-ago``, ``3d-ago``, ``1w-ago``, ``1m-ago``, ``1y-ago``), named
    periods (``now``, ``today``, ``this-week`` ...), years, months and
    quarters (``2006Q1``). Raises ValueError for anything else.
    """
    try:
        return _parse(text)
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"unsupported time format: {text!r}") from exc


def time_of(text: str) -> datetime:
    """Parse a time point; raises ValueError when the format is unsupported."""
    return parse_time_point(text)[0]