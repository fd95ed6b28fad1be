# ascent/agenda.py
from __future__ import annotations

import datetime as dt
from typing import Iterable, List

from .layout import layout
from .model import DAY_MIN, DayAgenda, Goal, PositionedOccurrence
from .recurrence import has_time, project, to_timed

TIMELINE_START_MIN = 6 * 60
TIMELINE_END_MIN = DAY_MIN
AGENDA_DAYS = 14


def day_view(
    goals: Iterable[Goal],
    day: dt.date,
    *,
    view_start: int = TIMELINE_START_MIN,
    view_end: int = TIMELINE_END_MIN,
) -> List[PositionedOccurrence]:
    """Timeline for one date: open, timed occurrences with overlap columns."""
    occs = [o for o in project(goals, day) if has_time(o)]
    return layout(to_timed(occs), view_start=view_start, view_end=view_end)


def build_agenda(
    goals: Iterable[Goal],
    start: dt.date,
    *,
    days: int = AGENDA_DAYS,
    hide_daily: bool = False,
) -> List[DayAgenda]:
    """Listing of the next `days` dates, completed items included.

    Within a day, anytime items come first, then timed items by time of day.
    Dates with nothing on them are omitted.
    """
    goals = list(goals)
    if hide_daily:
        goals = [g for g in goals if g.recurrence != "daily"]

    out: List[DayAgenda] = []
    for i in range(max(0, int(days))):
        day = start + dt.timedelta(days=i)
        items = project(goals, day, include_completed=True)
        if not items:
            continue
        items.sort(key=lambda o: (o.time_of_day is not None, o.time_of_day or 0))
        out.append(DayAgenda(date=day.isoformat(), items=tuple(items)))
    return out
