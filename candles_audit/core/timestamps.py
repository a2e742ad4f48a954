"""
Генерация ожидаемых временных меток свечей
"""

from datetime import datetime, timedelta
from typing import Iterator

import pytz

from .exceptions import TimeArithmeticException, ValidationException

UTC_FORMAT = '%Y-%m-%d %H:%M:%S UTC'


def to_utc_datetime(timestamp: int) -> datetime:
    try:
        return datetime.fromtimestamp(timestamp, tz=pytz.UTC)
    except (OverflowError, OSError, ValueError) as e:
        raise TimeArithmeticException(timestamp, original_error=e)


def to_timestamp(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return int(dt.timestamp())


def format_utc(timestamp: int) -> str:
    """Render epoch seconds as 'YYYY-MM-DD HH:MM:SS UTC'"""
    return to_utc_datetime(timestamp).strftime(UTC_FORMAT)


def floor_to_hour(timestamp: int) -> int:
    """Top of the UTC hour containing ``timestamp``"""
    dt = to_utc_datetime(timestamp)
    seed = pytz.UTC.localize(datetime(dt.year, dt.month, dt.day, dt.hour))
    return to_timestamp(seed)


def validate_resolution(resolution_minutes: int) -> None:
    if isinstance(resolution_minutes, bool) or not isinstance(resolution_minutes, int):
        raise ValidationException('resolution', resolution_minutes, "Resolution must be an integer")

    if resolution_minutes <= 0:
        raise ValidationException('resolution', resolution_minutes, "Resolution must be positive")


def expected_timestamps(from_ts: int, to_ts: int, resolution_minutes: int) -> Iterator[int]:
    """
    Yield the candle timestamps expected strictly inside (from_ts, to_ts)

    Boundaries are counted in steps of ``resolution_minutes`` from the top of
    the hour containing ``from_ts``. The anchor is fixed once, so for
    resolutions that don't divide 60 the grid drifts relative to later hours.

    Args:
        from_ts: Window start (UNIX seconds), never yielded
        to_ts: Window end (UNIX seconds), never yielded
        resolution_minutes: Candle length in minutes

    Yields:
        int: Epoch seconds in increasing order, each step resolution*60 apart

    Examples:
        10:07 -> 10:40 @ 15 -> 10:15, 10:30
        10:00 -> 12:30 @ 45 -> 10:45, 11:30, 12:15
    """
    validate_resolution(resolution_minutes)

    step = timedelta(minutes=resolution_minutes)
    step_seconds = resolution_minutes * 60

    seed = to_utc_datetime(floor_to_hour(from_ts))
    k = (from_ts - to_timestamp(seed)) // step_seconds + 1

    try:
        current = seed + step * k
    except OverflowError as e:
        raise TimeArithmeticException(from_ts, original_error=e)

    while to_timestamp(current) < to_ts:
        yield to_timestamp(current)
        try:
            current = current + step
        except OverflowError as e:
            raise TimeArithmeticException(to_timestamp(current), original_error=e)
