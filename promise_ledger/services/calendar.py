"""
Calendar and scheduling helpers.

Weekday numbering follows the stored schedules: 0=Sunday .. 6=Saturday.
Python's `date.weekday()` uses 0=Monday, so always go through `js_weekday`.
Weeks start on Monday. Every window is inclusive of both endpoints.
"""
from __future__ import annotations

import calendar as _calendar
import enum
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Iterator, Optional

from promise_ledger.services.entities import Commitment, CommitmentKind


class DayStatus(str, enum.Enum):
    done = "done"
    not_done = "not_done"
    na = "na"


@dataclass(frozen=True)
class Window:
    start: date
    end: date

    @property
    def days(self) -> int:
        """Number of calendar days covered (0 for an inverted window)."""
        return max(0, (self.end - self.start).days + 1)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def iter_days(self) -> Iterator[date]:
        for offset in range(self.days):
            yield self.start + timedelta(days=offset)


def js_weekday(day: date) -> int:
    """0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


def normalize_schedule(schedule_days: Optional[Iterable[int]]) -> frozenset[int]:
    """Valid weekdays only. Entries that are not ints in 0..6 are dropped."""
    if schedule_days is None or isinstance(schedule_days, (str, bytes)):
        return frozenset()
    try:
        entries = list(schedule_days)
    except TypeError:
        return frozenset()
    return frozenset(
        d for d in entries
        if isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6
    )


def is_scheduled_on(schedule_days: Optional[Iterable[int]], day: date) -> bool:
    return js_weekday(day) in normalize_schedule(schedule_days)


def week_window(day: date) -> Window:
    start = day - timedelta(days=day.weekday())
    return Window(start, start + timedelta(days=6))


def month_window(day: date) -> Window:
    last = _calendar.monthrange(day.year, day.month)[1]
    return Window(day.replace(day=1), day.replace(day=last))


def sprint_weeks(sprint_start: date, sprint_end: date) -> list[Window]:
    """Every Monday-start week overlapping [sprint_start, sprint_end], oldest first."""
    weeks: list[Window] = []
    current = week_window(sprint_start).start
    while current <= sprint_end:
        weeks.append(Window(current, current + timedelta(days=6)))
        current += timedelta(days=7)
    return weeks


def clip(window: Window, bounds: Window) -> Optional[Window]:
    start = max(window.start, bounds.start)
    end = min(window.end, bounds.end)
    if start > end:
        return None
    return Window(start, end)


def days_left_in_week(day: date) -> int:
    # Monday -> 6 ... Sunday -> 0
    return 6 - day.weekday()


def day_status(
    commitment: Commitment,
    day: date,
    completed: Optional[bool],
) -> DayStatus:
    if commitment.kind == CommitmentKind.weekly:
        return DayStatus.done if completed else DayStatus.not_done
    if not is_scheduled_on(commitment.schedule_days, day):
        return DayStatus.na
    return DayStatus.done if completed else DayStatus.not_done
