# backend/tests/repositories/test_schedule_repository.py
from datetime import time
from decimal import Decimal

from futsal_booking.repositories.schedule_repository import ScheduleRepository


def test_get_schedule_loads_field_and_venue(db, wednesday_schedule):
    schedule = ScheduleRepository(db).get_schedule(wednesday_schedule.id)

    assert schedule.day_name == "Wednesday"
    assert schedule.field.venue.city == "Bandung"


def test_list_for_field_skips_deleted(db, test_field, wednesday_schedule):
    repo = ScheduleRepository(db)
    extra = repo.create(
        field_id=test_field.id,
        day_of_week=6,
        start_time=time(8, 0),
        end_time=time(9, 0),
        price=Decimal("80000"),
    )
    db.commit()

    assert [s.id for s in repo.list_for_field(test_field.id)] == [wednesday_schedule.id, extra.id]

    repo.delete(extra.id)
    db.commit()

    assert [s.id for s in repo.list_for_field(test_field.id)] == [wednesday_schedule.id]


def test_to_dict_formats_times(db, wednesday_schedule):
    data = ScheduleRepository(db).get_schedule(wednesday_schedule.id).to_dict()

    assert data["start_time"] == "19:00"
    assert data["end_time"] == "20:00"
    assert data["price"] == 100000.0
