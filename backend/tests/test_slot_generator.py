"""Candidate slot enumeration."""

from datetime import date

import pytest

from slotbook.services.slots.generator import SlotGenerator, candidate_windows, day_of_week
from slotbook.services.slots.inventory import ResourceRef

from . import factories
from .conftest import BOOKING_DATE


def always_free(start, end):
    return [ResourceRef("table", 1, "T1")]


def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2025, 6, 1)) == 0  # Sunday
    assert day_of_week(date(2025, 6, 2)) == 1
    assert day_of_week(date(2025, 6, 7)) == 6


def test_candidate_windows_drop_overrunning_slot():
    windows = list(candidate_windows(540, 1020, 90, 30))
    assert windows[0] == (540, 630)
    assert windows[-1] == (930, 1020)
    assert len(windows) == 14


def test_candidate_windows_rejects_zero_step():
    with pytest.raises(ValueError):
        list(candidate_windows(540, 1020, 60, 0))


@pytest.mark.parametrize("interval", [15, 30])
def test_last_slot_ends_at_close(db_session, store, interval):
    business = factories.make_business(db_session, slot_interval=interval)
    factories.set_hours(db_session, business, "09:00", "17:00")

    slots = SlotGenerator(store).generate(business, BOOKING_DATE, 90, always_free)
    starts = [s.start_time for s in slots]

    assert starts[0] == "09:00"
    assert starts[-1] == "15:30"
    assert slots[-1].end_time == "17:00"
    assert "15:45" not in starts
    assert "16:00" not in starts


def test_closed_day_yields_no_slots(db_session, store):
    business = factories.make_business(db_session)
    factories.set_hours(db_session, business, closed_days=(day_of_week(BOOKING_DATE),))

    assert SlotGenerator(store).generate(business, BOOKING_DATE, 60, always_free) == []


def test_missing_hours_row_yields_no_slots(db_session, store):
    business = factories.make_business(db_session)

    assert SlotGenerator(store).opening_window(business, BOOKING_DATE) is None
    assert SlotGenerator(store).generate(business, BOOKING_DATE, 60, always_free) == []


def test_time_range_narrows_the_day(db_session, store):
    business = factories.make_business(db_session)
    factories.set_hours(db_session, business, "09:00", "17:00")

    slots = SlotGenerator(store).generate(
        business, BOOKING_DATE, 60, always_free, time_range=("12:00", "14:00")
    )

    assert [(s.start_time, s.end_time) for s in slots] == [
        ("12:00", "13:00"),
        ("12:30", "13:30"),
        ("13:00", "14:00"),
    ]


def test_candidates_without_assignment_are_skipped(db_session, store):
    business = factories.make_business(db_session)
    factories.set_hours(db_session, business, "09:00", "12:00")

    def only_morning(start, end):
        return [ResourceRef("table", 1, "T1")] if start < 600 else None

    slots = SlotGenerator(store).generate(business, BOOKING_DATE, 60, only_morning)

    assert [s.start_time for s in slots] == ["09:00", "09:30"]
    assert slots[0].to_dict() == {
        "start_time": "09:00",
        "end_time": "10:00",
        "resources": [{"type": "table", "id": 1, "name": "T1"}],
    }
