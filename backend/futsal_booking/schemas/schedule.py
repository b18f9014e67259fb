# backend/futsal_booking/schemas/schedule.py
"""
Schedule schemas.

Times are accepted as ``HH:MM`` strings and left unparsed here; the
schedule service owns parsing and the day/time/price rules.
"""

from datetime import datetime, time
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import Field, field_serializer

from ._strict_base import StrictModel, StrictRequestModel


class ScheduleCreate(StrictRequestModel):
    field_id: int = Field(..., gt=0, description="Field the slot belongs to")
    day_of_week: int = Field(..., description="1=Monday .. 7=Sunday")
    start_time: str = Field(..., description="Start time, HH:MM")
    end_time: str = Field(..., description="End time, HH:MM")
    price: Decimal = Field(..., description="Price per booking")


class ScheduleUpdate(StrictRequestModel):
    """Partial update; omitted fields keep their current value."""

    day_of_week: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    price: Optional[Decimal] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ScheduleResponse(StrictModel):
    id: int
    field_id: int
    day_of_week: int
    start_time: time
    end_time: time
    price: Decimal
    created_at: Optional[datetime] = None

    @field_serializer("start_time", "end_time")
    def _format_time(self, value: time) -> str:
        return value.strftime("%H:%M:%S")
