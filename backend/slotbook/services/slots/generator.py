# backend/slotbook/services/slots/generator.py
"""
Candidate slot enumeration over a business day.

Start at open_time, step by the business slot_interval; a candidate whose
end would pass close_time is dropped, never truncated. Each remaining
candidate is offered to an allocator; only candidates with an assignment
become slots.

Closed weekday or missing hours row → no slots (not an error).
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterator, Optional

from ...models import Businesses
from ..store import Store
from .inventory import ResourceRef
from .timemath import to_hhmm, to_minutes

Allocate = Callable[[int, int], Optional[list[ResourceRef]]]


@dataclass
class Slot:
    start_time: str
    end_time: str
    resources: list[ResourceRef] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "resources": [r.to_dict() for r in self.resources],
        }


def day_of_week(target_date: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (target_date.weekday() + 1) % 7


def candidate_windows(
    open_min: int,
    close_min: int,
    duration: int,
    step: int,
) -> Iterator[tuple[int, int]]:
    """Yield (start, end) minute pairs that fit between open and close."""
    if step <= 0:
        raise ValueError(f"slot interval must be positive, got {step}")

    t = open_min
    while t < close_min:
        end = t + duration
        if end > close_min:
            # every later candidate ends later still
            break
        yield t, end
        t += step


class SlotGenerator:
    def __init__(self, store: Store):
        self.store = store

    def opening_window(
        self,
        business: Businesses,
        target_date: date,
        time_range: Optional[tuple[str, str]] = None,
    ) -> Optional[tuple[int, int]]:
        """(open, close) in minutes for target_date, or None when closed."""
        hours = self.store.get_business_hours(business.id, day_of_week(target_date))
        if not hours or hours.is_closed:
            return None

        start, end = hours.open_time, hours.close_time
        if time_range:
            start, end = time_range
        return to_minutes(start), to_minutes(end)

    def generate(
        self,
        business: Businesses,
        target_date: date,
        duration: int,
        allocate: Allocate,
        time_range: Optional[tuple[str, str]] = None,
    ) -> list[Slot]:
        window = self.opening_window(business, target_date, time_range)
        if window is None:
            return []

        open_min, close_min = window
        step = business.slot_interval or 30

        slots: list[Slot] = []
        for start, end in candidate_windows(open_min, close_min, duration, step):
            resources = allocate(start, end)
            if resources:
                slots.append(Slot(
                    start_time=to_hhmm(start),
                    end_time=to_hhmm(end),
                    resources=resources,
                ))
        return slots
