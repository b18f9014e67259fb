# backend/futsal_booking/repositories/schedule_repository.py
"""
Schedule Repository

Data access for weekly schedules. Satisfies ``ScheduleLookup``.
"""

import logging
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.schedule import Schedule
from ..models.venue import Field
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ScheduleRepository(BaseRepository[Schedule]):
    def __init__(self, db: Session):
        super().__init__(db, Schedule)

    def get_schedule(self, schedule_id: int) -> Optional[Schedule]:
        return self.get_by_id(schedule_id)

    def list_for_field(self, field_id: int) -> List[Schedule]:
        """Live schedules of a field ordered by day, then start time."""
        try:
            query = (
                self._build_query()
                .filter(Schedule.field_id == field_id)
                .order_by(Schedule.day_of_week, Schedule.start_time)
            )
            return cast(List[Schedule], query.all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing schedules for field {field_id}: {str(e)}")
            raise RepositoryException(f"Failed to list schedules: {str(e)}") from e

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(Schedule.field).joinedload(Field.venue))
