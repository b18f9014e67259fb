# backend/futsal_booking/domain/booking_validation.py
"""
Temporal and consistency checks for booking requests.

Each check is independent and raises on failure, so callers run them in
sequence and the first failure short-circuits the booking attempt.
"""

from datetime import date, datetime
import re
from typing import Union

import pytz

from ..core.config import settings
from ..core.exceptions import (
    DayMismatchException,
    InvalidBookingDateException,
    PastDateBookingException,
)

BOOKING_DATE_FORMAT = "%Y-%m-%d"
DATE_ONLY_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_booking_date(value: str) -> date:
    """
    Parse a strict ``YYYY-MM-DD`` calendar date.

    Raises:
        InvalidBookingDateException: If the value is not a valid date in that format
    """
    if not isinstance(value, str) or not DATE_ONLY_REGEX.fullmatch(value):
        raise InvalidBookingDateException(str(value))
    try:
        return datetime.strptime(value, BOOKING_DATE_FORMAT).date()
    except ValueError:
        raise InvalidBookingDateException(value)


def normalize_day_of_week(value: date) -> int:
    """Day of week with Monday=1 .. Sunday=7."""
    return value.isoweekday()


def venue_today(now: Union[datetime, date, None] = None) -> date:
    """
    Today's date, truncated to day granularity, in the venue timezone.

    Aware datetimes are converted to the venue timezone first; naive
    datetimes and plain dates are taken as already local.
    """
    if now is None:
        now = datetime.now(pytz.timezone(settings.venue_timezone))
    if isinstance(now, datetime):
        if now.tzinfo is not None:
            now = now.astimezone(pytz.timezone(settings.venue_timezone))
        return now.date()
    return now


def check_not_past(booking_date: date, now: Union[datetime, date]) -> None:
    """
    Reject dates strictly before today. Today itself is allowed.

    Raises:
        PastDateBookingException: If booking_date precedes today
    """
    today = venue_today(now)
    if booking_date < today:
        raise PastDateBookingException(booking_date, today)


def check_day_of_week_match(booking_date: date, schedule_day_of_week: int) -> None:
    """
    Ensure the booking date falls on the schedule's weekday.

    Raises:
        DayMismatchException: If the weekdays differ
    """
    booking_day = normalize_day_of_week(booking_date)
    if booking_day != schedule_day_of_week:
        raise DayMismatchException(booking_date, booking_day, schedule_day_of_week)
