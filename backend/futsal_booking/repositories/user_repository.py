# backend/futsal_booking/repositories/user_repository.py
"""
User Repository

Read-only access to users for the booking core. Satisfies ``UserLookup``.
"""

from typing import Optional

from sqlalchemy.orm import Session

from ..models.user import User
from .base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_user(self, user_id: int) -> Optional[User]:
        return self.get_by_id(user_id)
