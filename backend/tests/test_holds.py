"""Advisory holds."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from slotbook.errors import StoreError
from slotbook.models import SlotHolds
from slotbook.services.slots.inventory import ResourceRef

from . import factories
from .conftest import BOOKING_DATE


def starts(slots):
    return {s.start_time: [r.id for r in s.resources] for s in slots}


def test_hold_hides_table_until_released(db_session, availability, holds, restaurant):
    table = factories.add_table(db_session, restaurant, "T", 4)
    window = ("10:00", "11:30")

    hold_ids = holds.create_hold(
        restaurant.id, BOOKING_DATE, *window, [ResourceRef("table", table.id, table.name)]
    )
    held = availability.get_availability(restaurant.id, BOOKING_DATE, party_size=2, time_range=window)
    assert held == []

    assert holds.release_holds(hold_ids) == 1
    released = availability.get_availability(restaurant.id, BOOKING_DATE, party_size=2, time_range=window)
    assert starts(released) == {"10:00": [table.id]}


def test_hold_expires_after_ttl(db_session, availability, holds, clock, restaurant):
    table = factories.add_table(db_session, restaurant, "T", 4)
    holds.create_hold(restaurant.id, BOOKING_DATE, "10:00", "11:30", [ResourceRef("table", table.id, "T")])

    clock.advance(4)
    assert "10:00" not in starts(availability.get_availability(restaurant.id, BOOKING_DATE, party_size=2))

    clock.advance(1)
    assert "10:00" in starts(availability.get_availability(restaurant.id, BOOKING_DATE, party_size=2))


def test_one_row_per_resource(db_session, holds, clock, spa):
    resources = [ResourceRef("staff", 1, "Anna"), ResourceRef("room", 1, "Room 1")]

    hold_ids = holds.create_hold(spa.id, BOOKING_DATE, "10:00", "11:00", resources)

    rows = db_session.query(SlotHolds).order_by(SlotHolds.id).all()
    assert [r.id for r in rows] == hold_ids
    assert [(r.resource_type, r.resource_id) for r in rows] == [("staff", 1), ("room", 1)]
    assert all(r.expires_at == clock() + holds.ttl for r in rows)


def test_failed_insert_leaves_no_hold(db_session, holds, store, restaurant):
    resources = [ResourceRef("table", 1, "T1"), ResourceRef("table", 2, "T2")]

    with patch.object(store.db, "flush", side_effect=OperationalError("INSERT", {}, Exception("disk I/O error"))):
        with pytest.raises(StoreError):
            holds.create_hold(restaurant.id, BOOKING_DATE, "10:00", "11:00", resources)

    assert db_session.query(SlotHolds).count() == 0


def test_release_is_idempotent(holds, restaurant):
    hold_ids = holds.create_hold(restaurant.id, BOOKING_DATE, "10:00", "11:00", [ResourceRef("table", 1, "T1")])

    assert holds.release_holds(hold_ids) == 1
    assert holds.release_holds(hold_ids) == 0
    assert holds.release_holds([]) == 0


def test_purge_deletes_only_expired(db_session, holds, clock, restaurant):
    holds.create_hold(restaurant.id, BOOKING_DATE, "10:00", "11:00", [ResourceRef("table", 1, "T1")])
    clock.advance(10)
    live = holds.create_hold(restaurant.id, BOOKING_DATE, "12:00", "13:00", [ResourceRef("table", 1, "T1")])

    assert holds.purge_expired() == 1
    assert [h.id for h in db_session.query(SlotHolds).all()] == live
