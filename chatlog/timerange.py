"""Parsing of time ranges and helpers that widen time points to range boundaries."""

from __future__ import annotations

import calendar
import re
from datetime import datetime, timedelta, timezone

from .timeparse import Granularity, parse_time_point

ALL_START = datetime(1970, 1, 1, tzinfo=timezone.utc)
ALL_END = datetime(9999, 12, 31, 23, 59, 59, 999_999, tzinfo=timezone.utc)

FULL_FORMAT = "%Y-%m-%d %H:%M:%S"
DAY_FORMAT = "%m-%d %H:%M:%S"
CLOCK_FORMAT = "%H:%M:%S"

_LAST_RE = re.compile(r"last-([0-9]+)([dwmy])")
_SEPARATORS = ("~", ",", " to ")
_FINE = (Granularity.SECOND, Granularity.MINUTE, Granularity.HOUR)
_END_OF_DAY = (23, 59, 59, 999_999)


def _is_local(moment: datetime) -> bool:
    """Tell whether an aware datetime carries the local time zone."""
    try:
        local = moment.replace(tzinfo=None).astimezone()
    except (OverflowError, OSError, ValueError):
        return False
    return local.utcoffset() == moment.utcoffset() and local.tzname() == moment.tzname()


def _at(moment: datetime, year: int, month: int, day: int,
        hour: int = 0, minute: int = 0, second: int = 0, micro: int = 0) -> datetime:
    """Build a wall-clock time in the same zone as moment."""
    naive = datetime(year, month, day, hour, minute, second, micro)
    if moment.tzinfo is None:
        return naive
    if _is_local(moment):
        try:
            return naive.astimezone()
        except (OverflowError, OSError, ValueError):
            pass
    return naive.replace(tzinfo=moment.tzinfo)


def _last_day(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _quarter_first_month(month: int) -> int:
    return (month - 1) // 3 * 3 + 1


def _shift(naive: datetime, years: int = 0, months: int = 0, days: int = 0) -> datetime:
    """Shift a wall-clock time, letting overflowing days roll into the next month."""
    total = (naive.year + years) * 12 + (naive.month - 1) + months
    year, month_index = divmod(total, 12)
    first = naive.replace(year=year, month=month_index + 1, day=1)
    return first + timedelta(days=naive.day - 1 + days)


def _last_range(num: int, unit: str, text: str) -> tuple[datetime, datetime]:
    if num <= 0:
        raise ValueError(f"unsupported time range: {text!r}")
    now = datetime.now()
    try:
        if unit == "d":
            shifted = _shift(now, days=-num)
        elif unit == "w":
            shifted = _shift(now, days=-num * 7)
        elif unit == "m":
            shifted = _shift(now, months=-num)
        else:
            shifted = _shift(now, years=-num)
    except (OverflowError, ValueError) as exc:
        raise ValueError(f"unsupported time range: {text!r}") from exc
    local_now = now.astimezone()
    start = _at(local_now, shifted.year, shifted.month, shifted.day)
    end = _at(local_now, now.year, now.month, now.day, *_END_OF_DAY)
    return start, end


def adjust_start_time(moment: datetime, granularity: Granularity) -> datetime:
    """Move a time point to the start of the period its granularity describes."""
    if granularity in _FINE:
        return moment
    if granularity == Granularity.MONTH:
        return _at(moment, moment.year, moment.month, 1)
    if granularity == Granularity.QUARTER:
        return _at(moment, moment.year, _quarter_first_month(moment.month), 1)
    if granularity == Granularity.YEAR:
        return _at(moment, moment.year, 1, 1)
    return _at(moment, moment.year, moment.month, moment.day)


def adjust_end_time(moment: datetime, granularity: Granularity) -> datetime:
    """Move a time point to the end of the period its granularity describes."""
    if granularity in _FINE:
        return moment
    if granularity == Granularity.MONTH:
        month = moment.month
        return _at(moment, moment.year, month, _last_day(moment.year, month), *_END_OF_DAY)
    if granularity == Granularity.QUARTER:
        month = _quarter_first_month(moment.month) + 2
        return _at(moment, moment.year, month, _last_day(moment.year, month), *_END_OF_DAY)
    if granularity == Granularity.YEAR:
        return _at(moment, moment.year, 12, 31, *_END_OF_DAY)
    return _at(moment, moment.year, moment.month, moment.day, *_END_OF_DAY)


def _span(moment: datetime, granularity: Granularity) -> tuple[datetime, datetime]:
    if granularity in _FINE or granularity == Granularity.DAY:
        return (
            _at(moment, moment.year, moment.month, moment.day),
            _at(moment, moment.year, moment.month, moment.day, *_END_OF_DAY),
        )
    return adjust_start_time(moment, granularity), adjust_end_time(moment, granularity)


def time_range_of(text: str) -> tuple[datetime, datetime]:
    """Parse a time range and return its (start, end).

    Accepts ``all``, ``last-7d``/``last-2w``/``last-3m``/``last-1y``, two time
    points joined by ``~``, ``,`` or `` to `` (swapped when reversed), or a
    single time point widened according to its precision. Raises ValueError
    for anything else.
    """
    if not text:
        raise ValueError("empty time range")
    text = text.strip()

    if text.lower() == "all":
        return ALL_START, ALL_END

    last = _LAST_RE.fullmatch(text)
    if last:
        return _last_range(int(last.group(1)), last.group(2), text)

    for sep in _SEPARATORS:
        if sep not in text:
            continue
        parts = text.split(sep)
        if len(parts) != 2:
            continue
        try:
            first, first_gran = parse_time_point(parts[0].strip())
            second, second_gran = parse_time_point(parts[1].strip())
        except ValueError:
            continue
        start = adjust_start_time(first, first_gran)
        end = adjust_end_time(second, second_gran)
        if start > end:
            start = adjust_start_time(second, second_gran)
            end = adjust_end_time(first, first_gran)
        return start, end

    try:
        moment, granularity = parse_time_point(text)
    except ValueError as exc:
        raise ValueError(f"unsupported time range: {text!r}") from exc
    return _span(moment, granularity)


def perfect_time_format(start: datetime, end: datetime) -> str:
    """Choose the shortest strftime format that tells apart times in a range."""
    if (end.hour, end.minute, end.second, end.microsecond) == (0, 0, 0, 0):
        end = end - timedelta(seconds=1)
    if start.year != end.year:
        return FULL_FORMAT
    if start.timetuple().tm_yday != end.timetuple().tm_yday:
        return DAY_FORMAT
    return CLOCK_FORMAT