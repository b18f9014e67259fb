# backend/futsal_booking/schemas/booking.py
"""
Booking schemas for the futsal booking platform.

These models are the request and response contract for an HTTP layer
built on top of ``BookingService``; the service itself takes plain
arguments and returns ORM objects, so nothing in this package
instantiates them.

The booking date travels as a ``YYYY-MM-DD`` string; the service parses it
so that malformed dates surface as ``InvalidBookingDateException`` rather
than a pydantic error.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from ..domain.booking_validation import DATE_ONLY_REGEX
from ..models.booking import BookingStatus
from ._strict_base import StrictModel, StrictRequestModel


class BookingCreate(StrictRequestModel):
    """Customer request to reserve a schedule slot on a date."""

    schedule_id: int = Field(..., gt=0, description="Schedule slot to book")
    booking_date: str = Field(..., description="Date of the booking (YYYY-MM-DD)")

    @field_validator("booking_date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        if isinstance(v, str):
            candidate = v.strip()
            if not DATE_ONLY_REGEX.fullmatch(candidate):
                raise ValueError("booking_date must be a YYYY-MM-DD date-only string")
            return candidate
        return v


class BookingResponse(StrictModel):
    id: int
    user_id: int
    schedule_id: int
    booking_date: date
    status: BookingStatus
    total_price: Decimal
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
