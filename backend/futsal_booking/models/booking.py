# backend/futsal_booking/models/booking.py
"""
Booking model for the futsal booking platform.

A booking reserves one schedule slot on one calendar date. The price is
snapshotted from the schedule when the booking is created.
"""

from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Any, Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    text,
)
from sqlalchemy.orm import relationship

from ..database import Base
from .types import SoftDeleteMixin, TimestampMixin

logger = logging.getLogger(__name__)

# Partial unique index holding one active booking per slot and date
ACTIVE_SLOT_INDEX = "uq_bookings_active_slot"


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "PENDING"  # Initial state of every new booking
    CONFIRMED = "CONFIRMED"  # Not reached by any booking operation yet
    CANCELLED = "CANCELLED"  # Cancelled by the owning customer
    COMPLETED = "COMPLETED"  # Set by out-of-band administrative processes


ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class Booking(TimestampMixin, SoftDeleteMixin, Base):
    """Reservation of a schedule slot for a specific date."""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    schedule_id = Column(Integer, ForeignKey("schedules.id"), nullable=False, index=True)

    booking_date = Column(Date, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)

    # Snapshot of Schedule.price at creation time
    total_price = Column(Numeric(12, 2), nullable=False)

    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    user = relationship("User", back_populates="bookings", foreign_keys=[user_id])
    schedule = relationship("Schedule", back_populates="bookings")
    cancelled_by = relationship("User", foreign_keys=[cancelled_by_id])

    __table_args__ = (
        CheckConstraint(
            "status IN ('PENDING', 'CONFIRMED', 'CANCELLED', 'COMPLETED')",
            name="ck_bookings_status",
        ),
        CheckConstraint("total_price > 0", name="ck_bookings_price_positive"),
        # One active booking per slot (schedule + date)
        Index(
            ACTIVE_SLOT_INDEX,
            "schedule_id",
            "booking_date",
            unique=True,
            sqlite_where=text("status NOT IN ('CANCELLED') AND deleted_at IS NULL"),
            postgresql_where=text("status NOT IN ('CANCELLED') AND deleted_at IS NULL"),
        ),
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.PENDING.value
        logger.debug(
            f"Creating booking for user {self.user_id} on schedule {self.schedule_id}"
        )

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: user={self.user_id}, schedule={self.schedule_id}, "
            f"date={self.booking_date}, status={self.status}>"
        )

    def cancel(self, cancelled_by_user_id: int) -> None:
        """Cancel this booking."""
        self.status = BookingStatus.CANCELLED.value
        self.cancelled_at = datetime.now(timezone.utc)
        self.cancelled_by_id = cancelled_by_user_id
        logger.info(f"Booking {self.id} cancelled by user {cancelled_by_user_id}")

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_BOOKING_STATUSES

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        created_at: Optional[datetime] = self.created_at
        updated_at: Optional[datetime] = self.updated_at
        return {
            "id": self.id,
            "user_id": self.user_id,
            "schedule_id": self.schedule_id,
            "booking_date": self.booking_date.isoformat() if self.booking_date else None,
            "status": self.status,
            "total_price": float(self.total_price) if self.total_price is not None else None,
            "created_at": created_at.isoformat() if created_at else None,
            "updated_at": updated_at.isoformat() if updated_at else None,
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
            "cancelled_by_id": self.cancelled_by_id,
        }
