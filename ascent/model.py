# ascent/model.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

PRIORITIES = ("P0", "P1", "P2")
DEFAULT_PRIORITY = "P2"
PRIORITY_RANK = {p: i for i, p in enumerate(PRIORITIES)}

RECURRENCES = ("none", "daily", "weekly", "monthly")

DEFAULT_GOAL_DURATION_MIN = 60
DEFAULT_SUBGOAL_DURATION_MIN = 30
# Booking a subgoal into the timeline reserves a full hour unless told otherwise.
SUBGOAL_BOOKING_DURATION_MIN = 60
DAY_MIN = 1440


@dataclass(frozen=True)
class SubGoal:
    id: str
    content: str
    is_completed: bool = False
    scheduled_time: Optional[str] = None
    duration: Optional[int] = None


@dataclass(frozen=True)
class Goal:
    id: str
    content: str
    parent_ids: Tuple[str, ...] = ()
    is_completed: bool = False
    priority: str = DEFAULT_PRIORITY
    created_at: str = ""
    completed_at: Optional[str] = None
    is_today: bool = False

    scheduled_time: Optional[str] = None  # "YYYY-MM-DDTHH:MM" (local wall time)
    duration: Optional[int] = None        # minutes
    start_date: Optional[str] = None      # "YYYY-MM-DD", inclusive
    end_date: Optional[str] = None        # "YYYY-MM-DD", inclusive
    recurrence: str = "none"

    sub_goals: Tuple[SubGoal, ...] = ()
    position: Tuple[float, float] = (0.0, 0.0)


@dataclass(frozen=True)
class DailyLog:
    """One step of the staircase: a dated note tied to the goal active when it was written."""

    id: str
    date: str  # ISO timestamp
    content: str
    step_index: int
    target_goal_content: Optional[str] = None
    linked_goal_id: Optional[str] = None


@dataclass(frozen=True)
class TaskItem:
    goal: Goal
    root: Optional[Goal]


@dataclass(frozen=True)
class Occurrence:
    id: str
    kind: str                   # "goal" | "subgoal"
    content: str
    time_of_day: Optional[int]  # minutes from midnight; None = anytime
    duration_min: int
    is_completed: bool
    source_goal_id: str
    source_subgoal_id: Optional[str] = None
    tags: Tuple[str, ...] = ()  # "recurring" | "multi-day"


@dataclass(frozen=True)
class TimedOccurrence:
    id: str
    start: int  # minutes from midnight
    end: int
    occurrence: Optional[Occurrence] = None

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class PositionedOccurrence:
    item: TimedOccurrence
    column: int
    column_count: int
    cluster_id: int
    visible_start: int
    visible_end: int

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def start(self) -> int:
        return self.item.start

    @property
    def end(self) -> int:
        return self.item.end


@dataclass(frozen=True)
class DayAgenda:
    date: str  # YYYY-MM-DD
    items: Tuple[Occurrence, ...]


__all__ = [
    "PRIORITIES",
    "DEFAULT_PRIORITY",
    "PRIORITY_RANK",
    "RECURRENCES",
    "DEFAULT_GOAL_DURATION_MIN",
    "DEFAULT_SUBGOAL_DURATION_MIN",
    "SUBGOAL_BOOKING_DURATION_MIN",
    "DAY_MIN",
    "SubGoal",
    "Goal",
    "DailyLog",
    "TaskItem",
    "Occurrence",
    "TimedOccurrence",
    "PositionedOccurrence",
    "DayAgenda",
]
