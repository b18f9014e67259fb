# backend/futsal_booking/services/booking_service.py
"""
Booking Service for the futsal booking platform

Handles all booking-related business logic:
- Creating a PENDING booking for a schedule slot on a date
- Listing a customer's bookings
- Fetching a single booking with its schedule, field and venue
- Owner cancellation

Every operation takes an ``ExecutionContext`` first. The context is checked
on entry and again before each repository call, so an expired request stops
before touching the database.
"""

from datetime import datetime
import logging
from typing import Callable, List, Optional

import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import (
    BookingNotFoundException,
    DomainException,
    InvalidRequestException,
    ScheduleNotFoundException,
    ServiceException,
    SlotAlreadyBookedException,
    UserNotFoundException,
)
from ..core.execution_context import ExecutionContext
from ..domain import booking_lifecycle
from ..domain.booking_validation import (
    check_day_of_week_match,
    check_not_past,
    parse_booking_date,
)
from ..models.booking import ACTIVE_SLOT_INDEX, Booking
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..repositories.interfaces import BookingStore, ScheduleLookup, UserLookup
from .base import BaseService

logger = logging.getLogger(__name__)


def venue_now() -> datetime:
    """Current wall-clock time at the venue."""
    return datetime.now(pytz.timezone(settings.venue_timezone))


def is_slot_conflict(exc: IntegrityError) -> bool:
    """
    True when ``exc`` is a violation of the active-slot unique index.

    PostgreSQL names the index in the message; SQLite names the columns.
    """
    message = str(exc.orig)
    if ACTIVE_SLOT_INDEX in message:
        return True
    return "UNIQUE constraint failed" in message and "bookings.booking_date" in message


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Collaborators are injected through the constructor; when omitted they
    are built from the session through ``RepositoryFactory``.
    """

    def __init__(
        self,
        db: Session,
        booking_repository: Optional[BookingStore] = None,
        schedule_repository: Optional[ScheduleLookup] = None,
        user_repository: Optional[UserLookup] = None,
        now_provider: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize booking service.

        Args:
            db: Database session
            booking_repository: Optional booking store
            schedule_repository: Optional schedule lookup
            user_repository: Optional user lookup
            now_provider: Optional clock used to decide what "today" is
        """
        super().__init__(db)
        self.booking_repository = booking_repository or RepositoryFactory.create_booking_repository(
            db
        )
        self.schedule_repository = (
            schedule_repository or RepositoryFactory.create_schedule_repository(db)
        )
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self._now = now_provider or venue_now

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self, ctx: ExecutionContext, schedule_id: int, booking_date: str, user_id: int
    ) -> Booking:
        """
        Create a PENDING booking for ``schedule_id`` on ``booking_date``.

        Args:
            ctx: Execution context bounding the operation
            schedule_id: Schedule slot to reserve
            booking_date: Calendar date as YYYY-MM-DD
            user_id: Customer making the booking

        Returns:
            The persisted booking with id and timestamps assigned

        Raises:
            OperationTimeoutException: Context expired or cancelled
            InvalidRequestException: Missing schedule_id, user_id or booking_date
            InvalidBookingDateException: booking_date is not YYYY-MM-DD
            PastDateBookingException: booking_date is before today
            ScheduleNotFoundException: Schedule does not exist
            DayMismatchException: booking_date is not on the schedule's weekday
            UserNotFoundException: User does not exist
            SlotAlreadyBookedException: Slot already held on that date
            ServiceException: Persistence failed
        """
        operation = "create_booking"
        ctx.ensure_active(operation)

        missing = [
            name
            for name, value in (
                ("schedule_id", schedule_id),
                ("user_id", user_id),
                ("booking_date", booking_date),
            )
            if not value
        ]
        if missing:
            raise InvalidRequestException("Invalid booking request", missing=missing)

        self.log_operation(
            operation, schedule_id=schedule_id, user_id=user_id, booking_date=booking_date
        )

        try:
            parsed_date = parse_booking_date(booking_date)
            check_not_past(parsed_date, self._now())

            with self._surface_repository_errors(operation):
                ctx.ensure_active(operation)
                schedule = self.schedule_repository.get_schedule(schedule_id)
                if schedule is None:
                    raise ScheduleNotFoundException(schedule_id)

                check_day_of_week_match(parsed_date, schedule.day_of_week)

                ctx.ensure_active(operation)
                user = self.user_repository.get_user(user_id)
                if user is None:
                    raise UserNotFoundException(user_id)

                if settings.enforce_slot_uniqueness:
                    ctx.ensure_active(operation)
                    if self.booking_repository.has_active_booking(schedule_id, parsed_date):
                        raise SlotAlreadyBookedException(schedule_id, parsed_date)

                booking = booking_lifecycle.new_booking(
                    user_id=user_id,
                    schedule_id=schedule_id,
                    booking_date=parsed_date,
                    total_price=schedule.price,
                )

                ctx.ensure_active(operation)
                with self.transaction():
                    try:
                        created = self.booking_repository.create_booking(booking)
                    except IntegrityError as exc:
                        if not is_slot_conflict(exc):
                            self.logger.error(f"Integrity error creating booking: {exc}")
                            raise ServiceException(
                                "Failed to create booking",
                                details={"operation": operation, "cause": str(exc.orig)},
                            ) from exc
                        self.logger.warning(
                            f"Slot conflict on insert for schedule {schedule_id} "
                            f"on {parsed_date}: {exc}"
                        )
                        raise SlotAlreadyBookedException(schedule_id, parsed_date) from exc
        except DomainException as exc:
            prometheus_metrics.inc_booking_outcome("create", exc.code.value)
            raise

        prometheus_metrics.inc_booking_outcome("create", "success")
        self.logger.info(
            f"Booking {created.id} created for user {user_id} on schedule {schedule_id}"
        )
        return created

    @BaseService.measure_operation("get_my_bookings")
    def get_my_bookings(self, ctx: ExecutionContext, user_id: int) -> List[Booking]:
        """
        All bookings belonging to ``user_id``, in every status.

        Raises:
            OperationTimeoutException: Context expired or cancelled
            InvalidRequestException: Missing user_id
        """
        operation = "get_my_bookings"
        ctx.ensure_active(operation)
        if not user_id:
            raise InvalidRequestException("Invalid user id", missing=["user_id"])

        with self._surface_repository_errors(operation):
            return self.booking_repository.list_bookings_for_user(user_id)

    @BaseService.measure_operation("get_booking_by_id")
    def get_booking_by_id(self, ctx: ExecutionContext, booking_id: int) -> Booking:
        """
        Fetch one booking with user, schedule, field and venue loaded.

        Raises:
            OperationTimeoutException: Context expired or cancelled
            InvalidRequestException: Missing booking_id
            BookingNotFoundException: Booking does not exist
        """
        operation = "get_booking_by_id"
        ctx.ensure_active(operation)
        if not booking_id:
            raise InvalidRequestException("Invalid booking id", missing=["booking_id"])

        with self._surface_repository_errors(operation):
            booking = self.booking_repository.get_booking(booking_id)
        if booking is None:
            raise BookingNotFoundException(booking_id)
        return booking

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, ctx: ExecutionContext, booking_id: int, user_id: int) -> None:
        """
        Cancel a booking on behalf of its owner.

        Ownership is checked before status, so a non-owner gets
        ForbiddenException whatever state the booking is in.

        Raises:
            OperationTimeoutException: Context expired or cancelled
            InvalidRequestException: Missing booking_id or user_id
            BookingNotFoundException: Booking does not exist
            ForbiddenException: user_id does not own the booking
            InvalidStateTransitionException: Booking already CANCELLED or COMPLETED
            ServiceException: Persistence failed
        """
        operation = "cancel_booking"
        ctx.ensure_active(operation)

        missing = [
            name for name, value in (("booking_id", booking_id), ("user_id", user_id)) if not value
        ]
        if missing:
            raise InvalidRequestException("Invalid cancel request", missing=missing)

        self.log_operation(operation, booking_id=booking_id, user_id=user_id)

        try:
            with self._surface_repository_errors(operation):
                booking = self.booking_repository.get_booking(booking_id)
                if booking is None:
                    raise BookingNotFoundException(booking_id)

                target_status = booking_lifecycle.check_cancellation(booking, user_id)

                ctx.ensure_active(operation)
                with self.transaction():
                    self.booking_repository.update_status(
                        booking, target_status, actor_user_id=user_id
                    )
        except DomainException as exc:
            prometheus_metrics.inc_booking_outcome("cancel", exc.code.value)
            raise

        prometheus_metrics.inc_booking_outcome("cancel", "success")
