# backend/tests/unit/test_booking_service_logic.py
"""
Unit tests for BookingService business logic.

These tests mock the repositories and the database session to test the
booking rules in isolation.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, Mock, patch

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from futsal_booking.core.exceptions import (
    BookingNotFoundException,
    DayMismatchException,
    ErrorCode,
    ForbiddenException,
    InvalidBookingDateException,
    InvalidRequestException,
    InvalidStateTransitionException,
    OperationTimeoutException,
    PastDateBookingException,
    RepositoryException,
    ScheduleNotFoundException,
    ServiceException,
    SlotAlreadyBookedException,
    UserNotFoundException,
)
from futsal_booking.core.execution_context import ExecutionContext
from futsal_booking.models.booking import Booking, BookingStatus
from futsal_booking.models.schedule import Schedule
from futsal_booking.models.user import User
from futsal_booking.repositories.booking_repository import BookingRepository
from futsal_booking.repositories.schedule_repository import ScheduleRepository
from futsal_booking.repositories.user_repository import UserRepository
from futsal_booking.services.booking_service import BookingService

TODAY = date(2024, 6, 12)  # Wednesday


class TestBookingServiceUnit:
    """Unit tests for BookingService with mocked dependencies."""

    @pytest.fixture
    def mock_db(self):
        return Mock(spec=Session)

    @pytest.fixture
    def booking_repository(self):
        repo = Mock(spec=BookingRepository)
        repo.has_active_booking.return_value = False

        def _persist(booking):
            booking.id = 99
            return booking

        repo.create_booking.side_effect = _persist
        return repo

    @pytest.fixture
    def mock_schedule(self):
        schedule = Mock(spec=Schedule)
        schedule.id = 1
        schedule.day_of_week = 3
        schedule.price = Decimal("100000")
        return schedule

    @pytest.fixture
    def schedule_repository(self, mock_schedule):
        repo = Mock(spec=ScheduleRepository)
        repo.get_schedule.return_value = mock_schedule
        return repo

    @pytest.fixture
    def mock_customer(self):
        user = Mock(spec=User)
        user.id = 10
        user.email = "budi@example.com"
        return user

    @pytest.fixture
    def user_repository(self, mock_customer):
        repo = Mock(spec=UserRepository)
        repo.get_user.return_value = mock_customer
        return repo

    @pytest.fixture
    def booking_service(self, mock_db, booking_repository, schedule_repository, user_repository):
        service = BookingService(
            mock_db,
            booking_repository=booking_repository,
            schedule_repository=schedule_repository,
            user_repository=user_repository,
            now_provider=lambda: TODAY,
        )
        # Mock the transaction context manager
        service.transaction = MagicMock()
        service.transaction.return_value.__enter__ = Mock()
        service.transaction.return_value.__exit__ = Mock(return_value=None)
        return service

    @pytest.fixture
    def ctx(self):
        return ExecutionContext.background()

    # create_booking

    def test_create_booking_success(self, booking_service, booking_repository, ctx):
        booking = booking_service.create_booking(ctx, 1, "2024-06-19", 10)

        assert booking.id == 99
        assert booking.status == BookingStatus.PENDING.value
        assert booking.total_price == Decimal("100000")
        assert booking.booking_date == date(2024, 6, 19)
        assert booking.user_id == 10
        booking_repository.create_booking.assert_called_once()
        booking_service.transaction.assert_called_once()

    def test_create_booking_today_is_allowed(self, booking_service, ctx):
        booking = booking_service.create_booking(ctx, 1, "2024-06-12", 10)
        assert booking.booking_date == TODAY

    @pytest.mark.parametrize(
        "schedule_id, booking_date, user_id",
        [(0, "2024-06-19", 10), (1, "", 10), (1, "2024-06-19", 0), (None, None, None)],
    )
    def test_missing_fields_rejected_before_collaborators(
        self,
        booking_service,
        booking_repository,
        schedule_repository,
        user_repository,
        ctx,
        schedule_id,
        booking_date,
        user_id,
    ):
        with pytest.raises(InvalidRequestException) as exc_info:
            booking_service.create_booking(ctx, schedule_id, booking_date, user_id)

        assert exc_info.value.code == ErrorCode.INVALID_REQUEST
        schedule_repository.get_schedule.assert_not_called()
        user_repository.get_user.assert_not_called()
        booking_repository.create_booking.assert_not_called()

    def test_invalid_date_format(self, booking_service, schedule_repository, ctx):
        with pytest.raises(InvalidBookingDateException):
            booking_service.create_booking(ctx, 1, "19-06-2024", 10)
        schedule_repository.get_schedule.assert_not_called()

    def test_past_date_rejected_before_lookup(self, booking_service, schedule_repository, ctx):
        with pytest.raises(PastDateBookingException):
            booking_service.create_booking(ctx, 1, "2024-06-11", 10)
        schedule_repository.get_schedule.assert_not_called()

    def test_schedule_not_found(self, booking_service, schedule_repository, user_repository, ctx):
        schedule_repository.get_schedule.return_value = None

        with pytest.raises(ScheduleNotFoundException):
            booking_service.create_booking(ctx, 1, "2024-06-19", 10)
        user_repository.get_user.assert_not_called()

    def test_day_mismatch(self, booking_service, user_repository, booking_repository, ctx):
        with pytest.raises(DayMismatchException):
            booking_service.create_booking(ctx, 1, "2024-06-20", 10)
        user_repository.get_user.assert_not_called()
        booking_repository.create_booking.assert_not_called()

    def test_user_not_found(self, booking_service, user_repository, booking_repository, ctx):
        user_repository.get_user.return_value = None

        with pytest.raises(UserNotFoundException):
            booking_service.create_booking(ctx, 1, "2024-06-19", 10)
        booking_repository.create_booking.assert_not_called()

    def test_slot_already_booked(self, booking_service, booking_repository, ctx):
        booking_repository.has_active_booking.return_value = True

        with pytest.raises(SlotAlreadyBookedException) as exc_info:
            booking_service.create_booking(ctx, 1, "2024-06-19", 10)

        assert exc_info.value.code == ErrorCode.SLOT_ALREADY_BOOKED
        booking_repository.create_booking.assert_not_called()

    def test_slot_check_can_be_disabled(self, booking_service, booking_repository, ctx):
        booking_repository.has_active_booking.return_value = True

        with patch("futsal_booking.services.booking_service.settings") as mock_settings:
            mock_settings.enforce_slot_uniqueness = False
            booking = booking_service.create_booking(ctx, 1, "2024-06-19", 10)

        assert booking.id == 99
        booking_repository.has_active_booking.assert_not_called()

    @pytest.mark.parametrize(
        "message",
        [
            "UNIQUE constraint failed: bookings.schedule_id, bookings.booking_date",
            'duplicate key value violates unique constraint "uq_bookings_active_slot"',
        ],
    )
    def test_slot_index_violation_on_insert_is_slot_conflict(
        self, booking_service, booking_repository, ctx, message
    ):
        booking_repository.create_booking.side_effect = IntegrityError(
            "INSERT INTO bookings", {}, Exception(message)
        )

        with pytest.raises(SlotAlreadyBookedException):
            booking_service.create_booking(ctx, 1, "2024-06-19", 10)

    @pytest.mark.parametrize(
        "message",
        [
            "FOREIGN KEY constraint failed",
            'new row for relation "bookings" violates check constraint "ck_bookings_price_positive"',
        ],
    )
    def test_other_integrity_errors_are_internal(
        self, booking_service, booking_repository, ctx, message
    ):
        booking_repository.create_booking.side_effect = IntegrityError(
            "INSERT INTO bookings", {}, Exception(message)
        )

        with pytest.raises(ServiceException) as exc_info:
            booking_service.create_booking(ctx, 1, "2024-06-19", 10)

        assert exc_info.value.code == ErrorCode.INTERNAL_ERROR
        assert isinstance(exc_info.value.__cause__, IntegrityError)

    def test_persistence_failure_is_internal_error(self, booking_service, booking_repository, ctx):
        booking_repository.create_booking.side_effect = RepositoryException("connection reset")

        with pytest.raises(ServiceException) as exc_info:
            booking_service.create_booking(ctx, 1, "2024-06-19", 10)

        assert exc_info.value.code == ErrorCode.INTERNAL_ERROR
        assert "connection reset" in exc_info.value.details["cause"]
        assert isinstance(exc_info.value.__cause__, RepositoryException)

    def test_expired_context_fails_before_anything(
        self, booking_service, schedule_repository, ctx
    ):
        ctx.cancel()

        with pytest.raises(OperationTimeoutException):
            booking_service.create_booking(ctx, 0, "", 0)
        schedule_repository.get_schedule.assert_not_called()

    def test_deadline_checked_between_collaborator_calls(
        self, booking_service, schedule_repository, user_repository, ctx, mock_schedule
    ):
        def _lookup_then_expire(schedule_id):
            ctx.cancel()
            return mock_schedule

        schedule_repository.get_schedule.side_effect = _lookup_then_expire

        with pytest.raises(OperationTimeoutException):
            booking_service.create_booking(ctx, 1, "2024-06-19", 10)
        user_repository.get_user.assert_not_called()

    def test_outcome_metric_recorded(self, booking_service, ctx):
        with patch("futsal_booking.services.booking_service.prometheus_metrics") as mock_metrics:
            with pytest.raises(DayMismatchException):
                booking_service.create_booking(ctx, 1, "2024-06-20", 10)

        mock_metrics.inc_booking_outcome.assert_called_once_with("create", "DAY_MISMATCH")

    # get_my_bookings / get_booking_by_id

    def test_get_my_bookings_returns_all(self, booking_service, booking_repository, ctx):
        bookings = [Mock(spec=Booking), Mock(spec=Booking)]
        booking_repository.list_bookings_for_user.return_value = bookings

        assert booking_service.get_my_bookings(ctx, 10) == bookings
        booking_repository.list_bookings_for_user.assert_called_once_with(10)

    def test_get_my_bookings_empty(self, booking_service, booking_repository, ctx):
        booking_repository.list_bookings_for_user.return_value = []
        assert booking_service.get_my_bookings(ctx, 10) == []

    def test_get_my_bookings_requires_user(self, booking_service, ctx):
        with pytest.raises(InvalidRequestException):
            booking_service.get_my_bookings(ctx, 0)

    def test_get_booking_by_id(self, booking_service, booking_repository, ctx):
        booking = Mock(spec=Booking)
        booking_repository.get_booking.return_value = booking

        assert booking_service.get_booking_by_id(ctx, 5) is booking

    def test_get_booking_by_id_not_found(self, booking_service, booking_repository, ctx):
        booking_repository.get_booking.return_value = None

        with pytest.raises(BookingNotFoundException):
            booking_service.get_booking_by_id(ctx, 5)

    def test_get_booking_by_id_zero(self, booking_service, booking_repository, ctx):
        with pytest.raises(InvalidRequestException):
            booking_service.get_booking_by_id(ctx, 0)
        booking_repository.get_booking.assert_not_called()

    def test_read_failure_is_internal_error(self, booking_service, booking_repository, ctx):
        booking_repository.list_bookings_for_user.side_effect = RepositoryException("timeout")

        with pytest.raises(ServiceException):
            booking_service.get_my_bookings(ctx, 10)

    # cancel_booking

    def _owned_booking(self, status=BookingStatus.PENDING, user_id=10):
        booking = Mock(spec=Booking)
        booking.id = 5
        booking.user_id = user_id
        booking.status = status.value
        return booking

    @pytest.mark.parametrize("status", [BookingStatus.PENDING, BookingStatus.CONFIRMED])
    def test_cancel_booking_success(self, booking_service, booking_repository, ctx, status):
        booking = self._owned_booking(status)
        booking_repository.get_booking.return_value = booking

        assert booking_service.cancel_booking(ctx, 5, 10) is None

        booking_repository.update_status.assert_called_once_with(
            booking, BookingStatus.CANCELLED, actor_user_id=10
        )

    @pytest.mark.parametrize("status", [BookingStatus.CANCELLED, BookingStatus.COMPLETED])
    def test_cancel_terminal_booking(self, booking_service, booking_repository, ctx, status):
        booking_repository.get_booking.return_value = self._owned_booking(status)

        with pytest.raises(InvalidStateTransitionException) as exc_info:
            booking_service.cancel_booking(ctx, 5, 10)

        assert exc_info.value.current_status == status.value
        booking_repository.update_status.assert_not_called()

    @pytest.mark.parametrize("status", list(BookingStatus))
    def test_cancel_by_non_owner_forbidden(self, booking_service, booking_repository, ctx, status):
        booking_repository.get_booking.return_value = self._owned_booking(status, user_id=11)

        with pytest.raises(ForbiddenException):
            booking_service.cancel_booking(ctx, 5, 10)
        booking_repository.update_status.assert_not_called()

    def test_cancel_not_found(self, booking_service, booking_repository, ctx):
        booking_repository.get_booking.return_value = None

        with pytest.raises(BookingNotFoundException):
            booking_service.cancel_booking(ctx, 5, 10)

    @pytest.mark.parametrize("booking_id, user_id", [(0, 10), (5, 0)])
    def test_cancel_requires_ids(self, booking_service, booking_repository, ctx, booking_id, user_id):
        with pytest.raises(InvalidRequestException):
            booking_service.cancel_booking(ctx, booking_id, user_id)
        booking_repository.get_booking.assert_not_called()

    def test_cancel_persistence_failure(self, booking_service, booking_repository, ctx):
        booking_repository.get_booking.return_value = self._owned_booking()
        booking_repository.update_status.side_effect = RepositoryException("deadlock")

        with pytest.raises(ServiceException):
            booking_service.cancel_booking(ctx, 5, 10)
