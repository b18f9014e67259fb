# backend/tests/conftest.py
"""
Pytest configuration for the futsal booking core.

Tests run against an in-memory SQLite database shared through a StaticPool,
so every session in a test sees the same connection. Tables are created
and dropped per test.

"Today" is pinned to Wednesday 2024-06-12 in the venue timezone through the
services' ``now_provider`` hook.
"""

import os

# Set before any futsal_booking import so the module-level engine never
# points at a file database during tests.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from datetime import date, datetime, time
from decimal import Decimal

import pytest
import pytz
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from futsal_booking.core.config import settings
from futsal_booking.core.enums import RoleName
from futsal_booking.core.execution_context import ExecutionContext
from futsal_booking.database import Base, init_db
from futsal_booking.models.booking import Booking, BookingStatus
from futsal_booking.models.schedule import Schedule
from futsal_booking.models.user import Role, User
from futsal_booking.models.venue import Field, Venue

TODAY = date(2024, 6, 12)  # Wednesday
WEDNESDAY = 3
THURSDAY = 4

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False
)


def venue_datetime(day: date, hour: int = 9, minute: int = 0) -> datetime:
    """Aware datetime at the venue for the given local date and time."""
    tz = pytz.timezone(settings.venue_timezone)
    return tz.localize(datetime(day.year, day.month, day.day, hour, minute))


@pytest.fixture(scope="function")
def db():
    """Fresh database session with an empty schema for each test."""
    init_db(bind=test_engine)
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def fixed_now():
    """Clock pinned to 09:00 on TODAY at the venue."""
    return lambda: venue_datetime(TODAY)


@pytest.fixture
def ctx() -> ExecutionContext:
    return ExecutionContext.with_timeout()


@pytest.fixture
def customer_role(db: Session) -> Role:
    role = Role(name=RoleName.CUSTOMER.value)
    db.add(role)
    db.flush()
    return role


@pytest.fixture
def admin_role(db: Session) -> Role:
    role = Role(name=RoleName.ADMIN.value)
    db.add(role)
    db.flush()
    return role


@pytest.fixture
def test_customer(db: Session, customer_role: Role) -> User:
    user = User(full_name="Budi Santoso", email="budi@example.com", role_id=customer_role.id)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def other_customer(db: Session, customer_role: Role) -> User:
    user = User(full_name="Siti Rahma", email="siti@example.com", role_id=customer_role.id)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_admin(db: Session, admin_role: Role) -> User:
    user = User(full_name="Venue Admin", email="admin@example.com", role_id=admin_role.id)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_venue(db: Session) -> Venue:
    venue = Venue(name="Arena Futsal", address="Jl. Merdeka 1", city="Bandung")
    db.add(venue)
    db.commit()
    return venue


@pytest.fixture
def test_field(db: Session, test_venue: Venue) -> Field:
    field = Field(venue_id=test_venue.id, name="Court A", type="vinyl")
    db.add(field)
    db.commit()
    return field


@pytest.fixture
def wednesday_schedule(db: Session, test_field: Field) -> Schedule:
    """Wednesday 19:00-20:00 slot priced at 100000."""
    schedule = Schedule(
        field_id=test_field.id,
        day_of_week=WEDNESDAY,
        start_time=time(19, 0),
        end_time=time(20, 0),
        price=Decimal("100000"),
    )
    db.add(schedule)
    db.commit()
    return schedule


@pytest.fixture
def make_booking(db: Session):
    """Factory inserting a booking row directly, bypassing the service rules."""

    def _make(
        user: User,
        schedule: Schedule,
        booking_date: date,
        status: BookingStatus = BookingStatus.PENDING,
    ) -> Booking:
        booking = Booking(
            user_id=user.id,
            schedule_id=schedule.id,
            booking_date=booking_date,
            status=status.value,
            total_price=schedule.price,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make
