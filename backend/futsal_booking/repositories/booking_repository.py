# backend/futsal_booking/repositories/booking_repository.py
"""
Booking Repository for the futsal booking platform

Implements all data access operations for booking management:
- Booking creation (with slot conflicts surfaced as IntegrityError)
- User-specific booking queries
- Status updates and cancellation audit fields
- Active booking checks per slot and per schedule
- Booking relationships eager loading
"""

from datetime import date
import logging
from typing import List, Optional, cast

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import ACTIVE_BOOKING_STATUSES, Booking, BookingStatus
from ..models.schedule import Schedule
from ..models.venue import Field
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_BOOKING_STATUSES]


class BookingRepository(BaseRepository[Booking]):
    """
    Repository for booking data access.

    Satisfies the ``BookingStore`` capability set used by the booking service.
    """

    def __init__(self, db: Session):
        """Initialize with Booking model."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def create_booking(self, booking: Booking) -> Booking:
        """
        Persist a new booking and load its generated id and timestamps.

        Raises:
            IntegrityError: When a database constraint rejects the row
            RepositoryException: For any other database failure
        """
        try:
            self.db.add(booking)
            self.db.flush()
            self.db.refresh(booking)
            self.logger.info(
                f"Created booking {booking.id} for user {booking.user_id} "
                f"on schedule {booking.schedule_id} ({booking.booking_date})"
            )
            return booking
        except IntegrityError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating booking: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to create booking: {str(e)}") from e

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        """
        Get a booking with user, schedule, field and venue loaded.

        Returns:
            The booking, or None if not found or soft-deleted
        """
        return self.get_by_id(booking_id, load_relationships=True)

    def list_bookings_for_user(self, user_id: int) -> List[Booking]:
        """
        All live bookings of a user, newest booking date first.
        """
        try:
            query = (
                self._apply_eager_loading(self._build_query())
                .filter(Booking.user_id == user_id)
                .order_by(Booking.booking_date.desc(), Booking.id.desc())
            )
            return cast(List[Booking], query.all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}") from e

    def update_status(
        self, booking: Booking, status: BookingStatus, *, actor_user_id: Optional[int] = None
    ) -> Booking:
        """
        Write a new status for an already loaded booking.

        Cancellation also records who cancelled and when.
        """
        try:
            if status == BookingStatus.CANCELLED and actor_user_id is not None:
                booking.cancel(actor_user_id)
            else:
                booking.status = status.value
            self.db.flush()
            self.logger.info(f"Booking {booking.id} status set to {status.value}")
            return booking
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating booking {booking.id} status: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to update booking status: {str(e)}") from e

    def has_active_booking(self, schedule_id: int, booking_date: date) -> bool:
        """True when a PENDING or CONFIRMED booking holds the slot on that date."""
        try:
            query = self._build_query().filter(
                Booking.schedule_id == schedule_id,
                Booking.booking_date == booking_date,
                Booking.status.in_(_ACTIVE_STATUS_VALUES),
            )
            return query.first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking slot availability: {str(e)}")
            raise RepositoryException(f"Failed to check slot availability: {str(e)}") from e

    def count_active_bookings_for_schedule(self, schedule_id: int, from_date: date) -> int:
        """
        Count active bookings of a schedule dated on or after ``from_date``.

        Used to guard schedule edits and deletion.
        """
        try:
            return cast(
                int,
                self._build_query()
                .filter(
                    Booking.schedule_id == schedule_id,
                    Booking.booking_date >= from_date,
                    Booking.status.in_(_ACTIVE_STATUS_VALUES),
                )
                .count(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting bookings for schedule {schedule_id}: {str(e)}")
            raise RepositoryException(f"Failed to count bookings: {str(e)}") from e

    # Helper method overrides

    def _apply_eager_loading(self, query: Query) -> Query:
        """
        Load the booking owner and the schedule -> field -> venue chain.
        """
        return query.options(
            joinedload(Booking.user),
            joinedload(Booking.schedule).joinedload(Schedule.field).joinedload(Field.venue),
        )
