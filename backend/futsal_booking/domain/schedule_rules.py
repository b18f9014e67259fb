# backend/futsal_booking/domain/schedule_rules.py
"""
Validation rules for recurring weekly schedules.

Pure functions with no database access; the schedule service runs them
before anything is persisted.
"""

from datetime import datetime, time
from decimal import Decimal, InvalidOperation
from typing import Union

from ..core.exceptions import (
    InvalidDayOfWeekException,
    InvalidPriceException,
    InvalidTimeFormatException,
    InvalidTimeRangeException,
)

MIN_DAY_OF_WEEK = 1  # Monday
MAX_DAY_OF_WEEK = 7  # Sunday

TIME_FORMATS = ("%H:%M", "%H:%M:%S")

Price = Union[Decimal, float, int, str]


def validate_day_of_week(day_of_week: int) -> None:
    if isinstance(day_of_week, bool) or not isinstance(day_of_week, int):
        raise InvalidDayOfWeekException(day_of_week)
    if not MIN_DAY_OF_WEEK <= day_of_week <= MAX_DAY_OF_WEEK:
        raise InvalidDayOfWeekException(day_of_week)


def validate_time_range(start_time: time, end_time: time) -> None:
    if end_time <= start_time:
        raise InvalidTimeRangeException(start_time, end_time)


def to_price(price: Price) -> Decimal:
    """Normalise a price to Decimal, rejecting non-numeric and non-positive values."""
    try:
        value = price if isinstance(price, Decimal) else Decimal(str(price))
    except (InvalidOperation, ValueError):
        raise InvalidPriceException(price)
    if not value.is_finite() or value <= 0:
        raise InvalidPriceException(price)
    return value


def validate_schedule(day_of_week: int, start_time: time, end_time: time, price: Price) -> None:
    """
    Validate a schedule definition.

    Checks run in order: day of week, time range, price.

    Raises:
        InvalidDayOfWeekException: day_of_week outside 1..7
        InvalidTimeRangeException: end_time not strictly after start_time
        InvalidPriceException: price not strictly positive
    """
    validate_day_of_week(day_of_week)
    validate_time_range(start_time, end_time)
    to_price(price)


def parse_time_of_day(value: Union[str, time]) -> time:
    """Parse ``HH:MM`` (or ``HH:MM:SS``) into a time-of-day."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise InvalidTimeFormatException(value)

    candidate = value.strip()
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).time()
        except ValueError:
            continue
    raise InvalidTimeFormatException(value)
