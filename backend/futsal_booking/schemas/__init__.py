"""
Pydantic DTOs for the futsal booking platform.

Request models are strict (unknown fields rejected); response models read
straight from ORM objects.
"""

from .booking import BookingCreate, BookingResponse
from .schedule import ScheduleCreate, ScheduleResponse, ScheduleUpdate

__all__ = [
    "BookingCreate",
    "BookingResponse",
    "ScheduleCreate",
    "ScheduleResponse",
    "ScheduleUpdate",
]
