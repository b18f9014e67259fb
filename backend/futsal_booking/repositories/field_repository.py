# backend/futsal_booking/repositories/field_repository.py
"""
Field Repository

Fields are managed elsewhere; schedules only need to confirm a field exists.
"""

from sqlalchemy.orm import Session

from ..models.venue import Field
from .base_repository import BaseRepository


class FieldRepository(BaseRepository[Field]):
    def __init__(self, db: Session):
        super().__init__(db, Field)

    def field_exists(self, field_id: int) -> bool:
        return self.exists(id=field_id)
