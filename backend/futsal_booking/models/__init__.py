"""
Database models for the futsal booking platform.

- Users and roles
- Venues and fields
- Weekly schedules
- Bookings
"""

from .booking import ACTIVE_BOOKING_STATUSES, Booking, BookingStatus
from .schedule import Schedule
from .user import Role, User
from .venue import Field, Venue

__all__ = [
    "ACTIVE_BOOKING_STATUSES",
    "Booking",
    "BookingStatus",
    "Field",
    "Role",
    "Schedule",
    "User",
    "Venue",
]
