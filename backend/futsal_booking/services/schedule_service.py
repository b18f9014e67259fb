# backend/futsal_booking/services/schedule_service.py
"""
Schedule Service

Admin-facing management of weekly schedule slots. Schedules that still
hold upcoming PENDING or CONFIRMED bookings cannot be edited or removed;
bookings keep the price they were created with either way.
"""

from datetime import datetime
import logging
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    FieldNotFoundException,
    InvalidRequestException,
    ScheduleHasBookingsException,
    ScheduleNotFoundException,
)
from ..core.execution_context import ExecutionContext
from ..domain.booking_validation import venue_today
from ..domain.schedule_rules import parse_time_of_day, to_price, validate_schedule
from ..models.schedule import Schedule
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.field_repository import FieldRepository
from ..repositories.schedule_repository import ScheduleRepository
from ..schemas.schedule import ScheduleCreate, ScheduleUpdate
from .base import BaseService
from .booking_service import venue_now

logger = logging.getLogger(__name__)


class ScheduleService(BaseService):
    def __init__(
        self,
        db: Session,
        schedule_repository: Optional[ScheduleRepository] = None,
        field_repository: Optional[FieldRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
        now_provider: Optional[Callable[[], datetime]] = None,
    ):
        super().__init__(db)
        self.schedule_repository = (
            schedule_repository or RepositoryFactory.create_schedule_repository(db)
        )
        self.field_repository = field_repository or RepositoryFactory.create_field_repository(db)
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )
        self._now = now_provider or venue_now

    @BaseService.measure_operation("get_schedule")
    def get_schedule(self, ctx: ExecutionContext, schedule_id: int) -> Schedule:
        operation = "get_schedule"
        ctx.ensure_active(operation)
        if not schedule_id:
            raise InvalidRequestException("Invalid schedule id", missing=["schedule_id"])

        with self._surface_repository_errors(operation):
            schedule = self.schedule_repository.get_schedule(schedule_id)
        if schedule is None:
            raise ScheduleNotFoundException(schedule_id)
        return schedule

    @BaseService.measure_operation("get_schedules_for_field")
    def get_schedules_for_field(self, ctx: ExecutionContext, field_id: int) -> List[Schedule]:
        """
        Live schedules of a field, ordered by weekday then start time.

        Raises:
            InvalidRequestException: Missing field_id
            FieldNotFoundException: Field does not exist
            ServiceException: Persistence failed
        """
        operation = "get_schedules_for_field"
        ctx.ensure_active(operation)
        if not field_id:
            raise InvalidRequestException("Invalid field id", missing=["field_id"])

        with self._surface_repository_errors(operation):
            if not self.field_repository.field_exists(field_id):
                raise FieldNotFoundException(field_id)

            ctx.ensure_active(operation)
            return self.schedule_repository.list_for_field(field_id)

    @BaseService.measure_operation("create_schedule")
    def create_schedule(self, ctx: ExecutionContext, data: ScheduleCreate) -> Schedule:
        """
        Create a weekly slot on a field.

        Raises:
            InvalidTimeFormatException: start_time or end_time is not HH:MM
            InvalidDayOfWeekException / InvalidTimeRangeException / InvalidPriceException
            FieldNotFoundException: Field does not exist
            ServiceException: Persistence failed
        """
        operation = "create_schedule"
        ctx.ensure_active(operation)

        start_time = parse_time_of_day(data.start_time)
        end_time = parse_time_of_day(data.end_time)
        validate_schedule(data.day_of_week, start_time, end_time, data.price)

        with self._surface_repository_errors(operation):
            if not self.field_repository.field_exists(data.field_id):
                raise FieldNotFoundException(data.field_id)

            self.log_operation(operation, field_id=data.field_id, day_of_week=data.day_of_week)

            ctx.ensure_active(operation)
            with self.transaction():
                schedule = self.schedule_repository.create(
                    field_id=data.field_id,
                    day_of_week=data.day_of_week,
                    start_time=start_time,
                    end_time=end_time,
                    price=to_price(data.price),
                )

        self.logger.info(f"Schedule {schedule.id} created for field {data.field_id}")
        return schedule

    @BaseService.measure_operation("update_schedule")
    def update_schedule(
        self, ctx: ExecutionContext, schedule_id: int, data: ScheduleUpdate
    ) -> Schedule:
        """
        Partially update a schedule.

        Omitted fields keep their stored value; the merged result must still
        pass the schedule rules.

        Raises:
            InvalidRequestException: Missing schedule_id
            ScheduleNotFoundException: Schedule does not exist
            ScheduleHasBookingsException: Upcoming active bookings hold the slot
            ServiceException: Persistence failed
        """
        operation = "update_schedule"
        ctx.ensure_active(operation)
        if not schedule_id:
            raise InvalidRequestException("Invalid schedule id", missing=["schedule_id"])

        with self._surface_repository_errors(operation):
            schedule = self.schedule_repository.get_schedule(schedule_id)
            if schedule is None:
                raise ScheduleNotFoundException(schedule_id)

            changes = data.changes()
            day_of_week = changes.get("day_of_week", schedule.day_of_week)
            start_time = parse_time_of_day(changes.get("start_time", schedule.start_time))
            end_time = parse_time_of_day(changes.get("end_time", schedule.end_time))
            price = changes.get("price", schedule.price)
            validate_schedule(day_of_week, start_time, end_time, price)

            ctx.ensure_active(operation)
            self._ensure_no_upcoming_bookings(schedule_id)

            self.log_operation(operation, schedule_id=schedule_id, fields=sorted(changes))

            ctx.ensure_active(operation)
            with self.transaction():
                updated = self.schedule_repository.update(
                    schedule_id,
                    day_of_week=day_of_week,
                    start_time=start_time,
                    end_time=end_time,
                    price=to_price(price),
                )

        if updated is None:
            raise ScheduleNotFoundException(schedule_id)
        return updated

    @BaseService.measure_operation("delete_schedule")
    def delete_schedule(self, ctx: ExecutionContext, schedule_id: int) -> None:
        """Soft delete a schedule with no upcoming active bookings."""
        operation = "delete_schedule"
        ctx.ensure_active(operation)
        if not schedule_id:
            raise InvalidRequestException("Invalid schedule id", missing=["schedule_id"])

        with self._surface_repository_errors(operation):
            if self.schedule_repository.get_schedule(schedule_id) is None:
                raise ScheduleNotFoundException(schedule_id)

            ctx.ensure_active(operation)
            self._ensure_no_upcoming_bookings(schedule_id)

            ctx.ensure_active(operation)
            with self.transaction():
                self.schedule_repository.delete(schedule_id)

        self.logger.info(f"Schedule {schedule_id} deleted")

    def _ensure_no_upcoming_bookings(self, schedule_id: int) -> None:
        active = self.booking_repository.count_active_bookings_for_schedule(
            schedule_id, venue_today(self._now())
        )
        if active:
            raise ScheduleHasBookingsException(schedule_id, active)
