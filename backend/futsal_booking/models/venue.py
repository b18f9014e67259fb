# backend/futsal_booking/models/venue.py
"""
Venue and field models.

A venue is a physical location; each venue has one or more fields that
schedules are attached to.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..database import Base
from .types import SoftDeleteMixin, TimestampMixin


class Venue(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False, index=True)

    fields = relationship("Field", back_populates="venue")

    def __repr__(self) -> str:
        return f"<Venue {self.id}: {self.name} ({self.city})>"


class Field(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "fields"

    id = Column(Integer, primary_key=True, autoincrement=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    type = Column(String(50), nullable=False)

    venue = relationship("Venue", back_populates="fields", lazy="joined")
    schedules = relationship("Schedule", back_populates="field")

    __table_args__ = (UniqueConstraint("venue_id", "name", name="uq_fields_venue_name"),)

    def __repr__(self) -> str:
        return f"<Field {self.id}: {self.name} venue={self.venue_id}>"
