# backend/futsal_booking/core/enums.py
"""
Core enums for the futsal booking platform.
"""

from enum import Enum


class RoleName(str, Enum):
    """
    Standard role names.

    Administrators manage venues, fields and schedules; customers book slots.
    """

    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"
