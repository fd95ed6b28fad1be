# ascent/recurrence.py
from __future__ import annotations

import calendar
import datetime as dt
from typing import Iterable, List, Optional, Tuple

from .model import (
    DAY_MIN,
    DEFAULT_GOAL_DURATION_MIN,
    DEFAULT_SUBGOAL_DURATION_MIN,
    Goal,
    Occurrence,
    SubGoal,
    TimedOccurrence,
)
from .util.timeparse import date_part, time_of_day_min


def _monthly_day(anchor: dt.date, day: dt.date) -> int:
    # Anchors past the end of a short month land on its last day.
    last = calendar.monthrange(day.year, day.month)[1]
    return min(anchor.day, last)


def occurs_on(goal: Goal, day: dt.date) -> Tuple[bool, Tuple[str, ...]]:
    """Whether the goal shows up on `day`, plus listing tags.

    First matching mode wins: recurrence, then date range, then the date of
    an explicit scheduled time. A recurring goal never consults its range.
    """
    created = date_part(goal.created_at)

    if goal.recurrence == "daily":
        ok = created is None or day >= created
        return ok, ("recurring",) if ok else ()
    if goal.recurrence == "weekly":
        ok = created is not None and day >= created and day.weekday() == created.weekday()
        return ok, ("recurring",) if ok else ()
    if goal.recurrence == "monthly":
        ok = created is not None and day >= created and day.day == _monthly_day(created, day)
        return ok, ("recurring",) if ok else ()

    if goal.start_date:
        start = date_part(goal.start_date)
        end = date_part(goal.end_date)
        ok = start is not None and start <= day and (end is None or day <= end)
        return ok, ("multi-day",) if ok else ()

    return date_part(goal.scheduled_time) == day, ()


def _duration(v: Optional[float], default: int) -> int:
    if isinstance(v, bool) or not isinstance(v, (int, float)) or v <= 0:
        return default
    return int(v)


def _sub_occurrence(goal: Goal, sg: SubGoal, day: dt.date) -> Optional[Occurrence]:
    if date_part(sg.scheduled_time) != day:
        return None
    return Occurrence(
        id=sg.id,
        kind="subgoal",
        content=sg.content,
        time_of_day=time_of_day_min(sg.scheduled_time),
        duration_min=_duration(sg.duration, DEFAULT_SUBGOAL_DURATION_MIN),
        is_completed=sg.is_completed,
        source_goal_id=goal.id,
        source_subgoal_id=sg.id,
    )


def project(goals: Iterable[Goal], day: dt.date, *, include_completed: bool = False) -> List[Occurrence]:
    """Occurrences of goals and subgoals on one calendar date.

    Completed items are left out unless `include_completed` is set (listing
    views keep them, calendar slots do not). Each subgoal is projected on its
    own scheduled date, independent of whether its goal occurs.
    """
    out: List[Occurrence] = []
    for g in goals:
        hit, tags = occurs_on(g, day)
        if hit and (include_completed or not g.is_completed):
            out.append(
                Occurrence(
                    id=g.id,
                    kind="goal",
                    content=g.content,
                    time_of_day=time_of_day_min(g.scheduled_time),
                    duration_min=_duration(g.duration, DEFAULT_GOAL_DURATION_MIN),
                    is_completed=g.is_completed,
                    source_goal_id=g.id,
                    tags=tags,
                )
            )
        for sg in g.sub_goals:
            if sg.is_completed and not include_completed:
                continue
            occ = _sub_occurrence(g, sg, day)
            if occ is not None:
                out.append(occ)
    return out


def has_time(occ: Occurrence) -> bool:
    return occ.time_of_day is not None


def to_timed(occurrences: Iterable[Occurrence]) -> List[TimedOccurrence]:
    """Timed occurrences as [start, end) minute intervals; untimed ones are skipped.

    Ends are clipped at midnight so every interval stays within one day.
    """
    return [
        TimedOccurrence(
            id=o.id,
            start=o.time_of_day,
            end=min(o.time_of_day + o.duration_min, DAY_MIN),
            occurrence=o,
        )
        for o in occurrences
        if o.time_of_day is not None
    ]
