# backend/futsal_booking/core/exceptions.py
"""
Domain-specific exceptions for the futsal booking platform.

Every error raised by the booking core carries an ``ErrorCode`` from a
closed enumeration, so callers compare kinds instead of matching message
text. The HTTP layer converts them with ``to_http_exception``; the core
itself never decides on transport status codes beyond that mapping.
"""

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class ErrorCode(str, Enum):
    """Closed set of error kinds surfaced by the booking core."""

    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_BOOKING_DATE = "INVALID_BOOKING_DATE"
    PAST_DATE_BOOKING = "PAST_DATE_BOOKING"
    DAY_MISMATCH = "DAY_MISMATCH"
    SCHEDULE_NOT_FOUND = "SCHEDULE_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    FIELD_NOT_FOUND = "FIELD_NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    SLOT_ALREADY_BOOKED = "SLOT_ALREADY_BOOKED"
    SCHEDULE_HAS_BOOKINGS = "SCHEDULE_HAS_BOOKINGS"
    INVALID_DAY_OF_WEEK = "INVALID_DAY_OF_WEEK"
    INVALID_TIME_RANGE = "INVALID_TIME_RANGE"
    INVALID_TIME_FORMAT = "INVALID_TIME_FORMAT"
    INVALID_PRICE = "INVALID_PRICE"
    TIMEOUT = "TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or ErrorCode.INTERNAL_ERROR
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code.value,
            "details": self.details,
        }

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.to_dict())


class ValidationException(DomainException):
    """Raised when request input fails validation."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.FORBIDDEN, details=details)


class ServiceException(DomainException):
    """Raised when a service operation fails for an unexpected reason."""

    def __init__(
        self,
        message: str = "An error occurred processing your request",
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.INTERNAL_ERROR, details=details)


class OperationTimeoutException(DomainException):
    """Raised when an operation's execution context expired or was cancelled."""

    status_code = status.HTTP_504_GATEWAY_TIMEOUT

    def __init__(self, operation: str, reason: str = "deadline exceeded") -> None:
        super().__init__(
            message=f"Operation {operation} aborted: {reason}",
            code=ErrorCode.TIMEOUT,
            details={"operation": operation, "reason": reason},
        )


# Request validation


class InvalidRequestException(ValidationException):
    def __init__(self, message: str = "Invalid request", **details: Any) -> None:
        super().__init__(message, code=ErrorCode.INVALID_REQUEST, details=details)


class InvalidBookingDateException(ValidationException):
    def __init__(self, value: str) -> None:
        super().__init__(
            message="Invalid booking date, expected YYYY-MM-DD",
            code=ErrorCode.INVALID_BOOKING_DATE,
            details={"booking_date": value},
        )


# Schedule validation


class InvalidDayOfWeekException(ValidationException):
    def __init__(self, day_of_week: Any) -> None:
        super().__init__(
            message="Day of week must be between 1 and 7",
            code=ErrorCode.INVALID_DAY_OF_WEEK,
            details={"day_of_week": day_of_week},
        )


class InvalidTimeRangeException(ValidationException):
    def __init__(self, start_time: Any, end_time: Any) -> None:
        super().__init__(
            message="End time must be after start time",
            code=ErrorCode.INVALID_TIME_RANGE,
            details={"start_time": str(start_time), "end_time": str(end_time)},
        )


class InvalidTimeFormatException(ValidationException):
    def __init__(self, value: Any) -> None:
        super().__init__(
            message="Invalid time format, use HH:MM",
            code=ErrorCode.INVALID_TIME_FORMAT,
            details={"value": value},
        )


class InvalidPriceException(ValidationException):
    def __init__(self, price: Any) -> None:
        super().__init__(
            message="Price must be positive",
            code=ErrorCode.INVALID_PRICE,
            details={"price": str(price)},
        )


# Booking rules


class PastDateBookingException(BusinessRuleException):
    def __init__(self, booking_date: Any, today: Any) -> None:
        super().__init__(
            message="Cannot book a past date",
            code=ErrorCode.PAST_DATE_BOOKING,
            details={"booking_date": str(booking_date), "today": str(today)},
        )


class DayMismatchException(BusinessRuleException):
    def __init__(self, booking_date: Any, booking_day_of_week: int, schedule_day_of_week: int):
        super().__init__(
            message="Booking date does not match schedule day",
            code=ErrorCode.DAY_MISMATCH,
            details={
                "booking_date": str(booking_date),
                "booking_day_of_week": booking_day_of_week,
                "schedule_day_of_week": schedule_day_of_week,
            },
        )


class InvalidStateTransitionException(ConflictException):
    """Raised when a booking cannot move from its current status."""

    def __init__(self, current_status: str, target_status: str) -> None:
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            message=f"Cannot cancel booking with status: {current_status}",
            code=ErrorCode.INVALID_STATE_TRANSITION,
            details={"current_status": current_status, "target_status": target_status},
        )


class SlotAlreadyBookedException(ConflictException):
    """Raised when a schedule already has an active booking on the requested date."""

    def __init__(self, schedule_id: int, booking_date: Any) -> None:
        super().__init__(
            message="Slot already booked for this date",
            code=ErrorCode.SLOT_ALREADY_BOOKED,
            details={"schedule_id": schedule_id, "booking_date": str(booking_date)},
        )


class ScheduleHasBookingsException(ConflictException):
    def __init__(self, schedule_id: int, active_bookings: int) -> None:
        super().__init__(
            message="Cannot modify schedule with existing bookings",
            code=ErrorCode.SCHEDULE_HAS_BOOKINGS,
            details={"schedule_id": schedule_id, "active_bookings": active_bookings},
        )


# Missing entities


class ScheduleNotFoundException(NotFoundException):
    def __init__(self, schedule_id: int) -> None:
        super().__init__(
            "Schedule not found", code=ErrorCode.SCHEDULE_NOT_FOUND, details={"id": schedule_id}
        )


class UserNotFoundException(NotFoundException):
    def __init__(self, user_id: int) -> None:
        super().__init__("User not found", code=ErrorCode.USER_NOT_FOUND, details={"id": user_id})


class BookingNotFoundException(NotFoundException):
    def __init__(self, booking_id: int) -> None:
        super().__init__(
            "Booking not found", code=ErrorCode.BOOKING_NOT_FOUND, details={"id": booking_id}
        )


class FieldNotFoundException(NotFoundException):
    def __init__(self, field_id: int) -> None:
        super().__init__("Field not found", code=ErrorCode.FIELD_NOT_FOUND, details={"id": field_id})


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
