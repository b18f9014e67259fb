# backend/futsal_booking/repositories/__init__.py
"""
Repository layer for the futsal booking platform.

Repositories own every database query; services own transactions.
"""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .factory import RepositoryFactory
from .field_repository import FieldRepository
from .interfaces import BookingStore, ScheduleLookup, UserLookup
from .schedule_repository import ScheduleRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "BookingStore",
    "FieldRepository",
    "RepositoryFactory",
    "ScheduleLookup",
    "ScheduleRepository",
    "UserLookup",
    "UserRepository",
]
