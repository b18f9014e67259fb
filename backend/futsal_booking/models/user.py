# backend/futsal_booking/models/user.py
"""
User and role models.

Users are owned by the registration flow; the booking core only reads a
user's id and role to attach ownership to bookings.
"""

import logging
from typing import Any, Optional

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..core.enums import RoleName
from ..database import Base
from .types import SoftDeleteMixin, TimestampMixin

logger = logging.getLogger(__name__)


class Role(Base):
    """User role (ADMIN or CUSTOMER)."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False)

    users = relationship("User", back_populates="role")

    def __repr__(self) -> str:
        return f"<Role {self.name}>"


class User(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=True)

    role = relationship("Role", back_populates="users", lazy="joined")
    bookings = relationship("Booking", back_populates="user", foreign_keys="Booking.user_id")

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        logger.debug(f"Creating user {self.email}")

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email} role={self.role_name}>"

    @property
    def role_name(self) -> Optional[str]:
        return self.role.name if self.role is not None else None

    @property
    def is_admin(self) -> bool:
        return self.role_name == RoleName.ADMIN

    @property
    def is_customer(self) -> bool:
        return self.role_name == RoleName.CUSTOMER
