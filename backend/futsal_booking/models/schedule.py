# backend/futsal_booking/models/schedule.py
"""
Schedule model.

A schedule is a recurring weekly slot on one field: a day of week
(1=Monday .. 7=Sunday), a time-of-day range and a price. Bookings reference
a schedule and copy its price at creation time, so later price edits never
change existing bookings.
"""

from typing import Any, Dict

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, Time
from sqlalchemy.orm import relationship

from ..database import Base
from .types import SoftDeleteMixin, TimestampMixin

DAY_NAMES = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
    7: "Sunday",
}


class Schedule(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    field_id = Column(Integer, ForeignKey("fields.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)

    field = relationship("Field", back_populates="schedules", lazy="joined")
    bookings = relationship("Booking", back_populates="schedule")

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 1 AND 7", name="ck_schedules_day_of_week"),
        CheckConstraint("price > 0", name="ck_schedules_price_positive"),
        CheckConstraint("start_time < end_time", name="ck_schedules_time_order"),
    )

    def __repr__(self) -> str:
        return (
            f"<Schedule {self.id}: field={self.field_id}, day={self.day_of_week}, "
            f"time={self.start_time}-{self.end_time}, price={self.price}>"
        )

    @property
    def day_name(self) -> str:
        return DAY_NAMES.get(self.day_of_week, "Unknown")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "field_id": self.field_id,
            "day_of_week": self.day_of_week,
            "day_name": self.day_name,
            "start_time": self.start_time.strftime("%H:%M") if self.start_time else None,
            "end_time": self.end_time.strftime("%H:%M") if self.end_time else None,
            "price": float(self.price) if self.price is not None else None,
        }
