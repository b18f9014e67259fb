# backend/futsal_booking/repositories/interfaces.py
"""
Capability sets the booking service depends on.

The SQLAlchemy repositories in this package satisfy them structurally;
tests substitute ``Mock(spec=...)`` doubles built from the concrete classes.
"""

from datetime import date
from typing import List, Optional, Protocol

from ..models.booking import Booking, BookingStatus
from ..models.schedule import Schedule
from ..models.user import User


class ScheduleLookup(Protocol):
    def get_schedule(self, schedule_id: int) -> Optional[Schedule]:
        ...


class UserLookup(Protocol):
    def get_user(self, user_id: int) -> Optional[User]:
        ...


class BookingStore(Protocol):
    def create_booking(self, booking: Booking) -> Booking:
        ...

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        ...

    def list_bookings_for_user(self, user_id: int) -> List[Booking]:
        ...

    def update_status(
        self, booking: Booking, status: BookingStatus, *, actor_user_id: Optional[int] = None
    ) -> Booking:
        ...

    def has_active_booking(self, schedule_id: int, booking_date: date) -> bool:
        ...
