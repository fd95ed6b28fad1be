# ascent/store.py
from __future__ import annotations

import datetime as dt
import uuid
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .model import DEFAULT_GOAL_DURATION_MIN, PRIORITIES, SUBGOAL_BOOKING_DURATION_MIN, DailyLog, Goal, SubGoal
from .normalize import daily_log_to_dict, goal_to_dict, normalize_daily_logs, normalize_goals
from .schema import LATEST_STATE_VERSION, upgrade_state

Clock = Callable[[], dt.datetime]

_GOAL_FIELDS = frozenset(f.name for f in fields(Goal)) - {"id"}
_OWN_KEYS = ("version", "goals", "activeGoalId", "taskOrder", "dailyLogs")


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _iso(t: dt.datetime) -> str:
    return t.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _new_id() -> str:
    return uuid.uuid4().hex


def _minutes(v: Any) -> Optional[int]:
    if v is None:
        return None
    if isinstance(v, bool) or not isinstance(v, (int, float)) or v <= 0:
        raise ValueError(f"duration must be a positive number of minutes; got {v!r}")
    return int(v)


@dataclass(frozen=True)
class StoreSnapshot:
    goals: Tuple[Goal, ...]
    task_order: Tuple[str, ...]
    active_goal_id: Optional[str]
    daily_logs: Tuple[DailyLog, ...] = ()


class GoalStore:
    """Single-writer owner of the goal graph, the custom task order and the active goal.

    Every mutation publishes a fresh tuple of (frozen) goals, so a snapshot
    handed to a derivation never changes underneath it. Mutations naming an
    unknown id leave the store as it was.
    """

    def __init__(
        self,
        goals: Iterable[Goal] = (),
        task_order: Iterable[str] = (),
        active_goal_id: Optional[str] = None,
        daily_logs: Iterable[DailyLog] = (),
        *,
        clock: Optional[Clock] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._goals: Tuple[Goal, ...] = tuple(goals)
        self._task_order: Tuple[str, ...] = tuple(task_order)
        self._active_goal_id = active_goal_id
        self._daily_logs: Tuple[DailyLog, ...] = tuple(daily_logs)
        self._clock = clock or _utc_now
        self._new_id = id_factory or _new_id
        self._extra: Dict[str, Any] = {}

    # --- read access -------------------------------------------------------

    @property
    def goals(self) -> Tuple[Goal, ...]:
        return self._goals

    @property
    def task_order(self) -> Tuple[str, ...]:
        return self._task_order

    @property
    def active_goal_id(self) -> Optional[str]:
        return self._active_goal_id

    @property
    def daily_logs(self) -> Tuple[DailyLog, ...]:
        return self._daily_logs

    def get(self, goal_id: str) -> Optional[Goal]:
        return next((g for g in self._goals if g.id == goal_id), None)

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            goals=self._goals,
            task_order=self._task_order,
            active_goal_id=self._active_goal_id,
            daily_logs=self._daily_logs,
        )

    # --- internals ---------------------------------------------------------

    def _map(self, goal_id: str, fn: Callable[[Goal], Goal]) -> bool:
        hit = False
        out: List[Goal] = []
        for g in self._goals:
            if g.id == goal_id:
                g = fn(g)
                hit = True
            out.append(g)
        if hit:
            self._goals = tuple(out)
        return hit

    def _map_sub(self, goal_id: str, sub_id: str, fn: Callable[[SubGoal], SubGoal]) -> bool:
        def _apply(g: Goal) -> Goal:
            return replace(g, sub_goals=tuple(fn(sg) if sg.id == sub_id else sg for sg in g.sub_goals))

        return self._map(goal_id, _apply)

    # --- goals -------------------------------------------------------------

    def add_goal(
        self,
        content: str,
        parent_id: Optional[str] = None,
        position: Tuple[float, float] = (0.0, 0.0),
    ) -> str:
        """Create a P2 goal; the very first goal also becomes the active one."""
        goal = Goal(
            id=self._new_id(),
            content=content,
            parent_ids=(parent_id,) if parent_id else (),
            created_at=_iso(self._clock()),
            position=(float(position[0]), float(position[1])),
        )
        if not self._goals and not self._active_goal_id:
            self._active_goal_id = goal.id
        self._goals = self._goals + (goal,)
        return goal.id

    def update_goal(self, goal_id: str, **changes: Any) -> bool:
        unknown = set(changes) - _GOAL_FIELDS
        if unknown:
            raise TypeError(f"unknown Goal field(s): {', '.join(sorted(unknown))}")
        if "parent_ids" in changes:
            changes["parent_ids"] = tuple(changes["parent_ids"])
        if "sub_goals" in changes:
            changes["sub_goals"] = tuple(changes["sub_goals"])
        if "duration" in changes:
            changes["duration"] = _minutes(changes["duration"])
        return self._map(goal_id, lambda g: replace(g, **changes))

    def delete_goal(self, goal_id: str) -> bool:
        """Remove a goal (and its subgoals) and strip it from every parent list."""
        if self.get(goal_id) is None:
            return False
        self._goals = tuple(
            replace(g, parent_ids=tuple(p for p in g.parent_ids if p != goal_id)) if goal_id in g.parent_ids else g
            for g in self._goals
            if g.id != goal_id
        )
        if self._active_goal_id == goal_id:
            self._active_goal_id = None
        return True

    def unlink_goal(self, goal_id: str) -> bool:
        return self._map(goal_id, lambda g: replace(g, parent_ids=()))

    def link_goal(self, goal_id: str, parent_id: str) -> bool:
        if goal_id == parent_id or self.get(parent_id) is None:
            return False
        return self._map(
            goal_id,
            lambda g: g if parent_id in g.parent_ids else replace(g, parent_ids=g.parent_ids + (parent_id,)),
        )

    def set_active_goal(self, goal_id: Optional[str]) -> None:
        """Make a goal active; activating a completed goal reopens it."""
        if goal_id is None:
            self._active_goal_id = None
            return
        self._active_goal_id = goal_id
        self._map(goal_id, lambda g: replace(g, is_completed=False, completed_at=None))

    def set_task_order(self, order: Sequence[str]) -> None:
        self._task_order = tuple(order)

    def set_goal_priority(self, goal_id: str, priority: str) -> bool:
        if priority not in PRIORITIES:
            raise ValueError(f"Unknown priority: {priority!r} (expected one of {', '.join(PRIORITIES)})")
        return self._map(goal_id, lambda g: replace(g, priority=priority))

    def set_goal_schedule(
        self,
        goal_id: str,
        time: Optional[str],
        duration: int = DEFAULT_GOAL_DURATION_MIN,
    ) -> bool:
        """Set or clear (time=None) a goal's scheduled time; clearing also drops its duration."""
        return self._map(
            goal_id,
            lambda g: replace(g, scheduled_time=time, duration=int(duration) if time else None),
        )

    def complete_goal(self, goal_id: str) -> bool:
        """Mark a goal complete.

        Refused (returns False) while any of its subgoals is open. The first
        parent becomes active; otherwise the active goal is cleared if it was
        this one.
        """
        goal = self.get(goal_id)
        if goal is None:
            return False
        if any(not sg.is_completed for sg in goal.sub_goals):
            return False

        parent_id = goal.parent_ids[0] if goal.parent_ids else None
        if parent_id:
            self._active_goal_id = parent_id
        elif self._active_goal_id == goal_id:
            self._active_goal_id = None

        stamp = _iso(self._clock())
        self._map(goal_id, lambda g: replace(g, is_completed=True, completed_at=stamp))
        return True

    def toggle_goal_complete(self, goal_id: str) -> bool:
        goal = self.get(goal_id)
        if goal is None:
            return False
        if goal.is_completed:
            return self._map(goal_id, lambda g: replace(g, is_completed=False, completed_at=None))
        return self.complete_goal(goal_id)

    def toggle_goal_today(self, goal_id: str) -> bool:
        return self._map(goal_id, lambda g: replace(g, is_today=not g.is_today))

    # --- subgoals ----------------------------------------------------------

    def add_sub_goal(self, goal_id: str, content: str) -> Optional[str]:
        sub = SubGoal(id=self._new_id(), content=content)
        if not self._map(goal_id, lambda g: replace(g, sub_goals=g.sub_goals + (sub,))):
            return None
        return sub.id

    def toggle_sub_goal(self, goal_id: str, sub_id: str) -> bool:
        return self._map_sub(goal_id, sub_id, lambda sg: replace(sg, is_completed=not sg.is_completed))

    def delete_sub_goal(self, goal_id: str, sub_id: str) -> bool:
        return self._map(
            goal_id,
            lambda g: replace(g, sub_goals=tuple(sg for sg in g.sub_goals if sg.id != sub_id)),
        )

    def reorder_sub_goals(self, goal_id: str, sub_ids: Sequence[str]) -> bool:
        """Reorder subgoals by id; ids not listed keep their relative order at the end."""

        def _apply(g: Goal) -> Goal:
            pos = {sid: i for i, sid in enumerate(sub_ids)}
            ordered = sorted(g.sub_goals, key=lambda sg: pos.get(sg.id, len(pos)))
            return replace(g, sub_goals=tuple(ordered))

        return self._map(goal_id, _apply)

    def schedule_sub_goal(
        self,
        goal_id: str,
        sub_id: str,
        time: Optional[str],
        duration: int = SUBGOAL_BOOKING_DURATION_MIN,
    ) -> bool:
        return self._map_sub(
            goal_id,
            sub_id,
            lambda sg: replace(sg, scheduled_time=time, duration=int(duration) if time else None),
        )

    def unschedule_sub_goal(self, goal_id: str, sub_id: str) -> bool:
        return self._map_sub(goal_id, sub_id, lambda sg: replace(sg, scheduled_time=None, duration=None))

    # --- daily logs ----------------------------------------------------------

    def add_daily_log(self, content: str) -> str:
        """Append the next step. It records the active goal (id and content) at the time of writing."""
        active = self.get(self._active_goal_id) if self._active_goal_id else None
        log = DailyLog(
            id=self._new_id(),
            date=_iso(self._clock()),
            content=content,
            step_index=len(self._daily_logs),
            target_goal_content=active.content if active else None,
            linked_goal_id=self._active_goal_id,
        )
        self._daily_logs = self._daily_logs + (log,)
        return log.id

    def update_daily_log(self, log_id: str, content: str) -> bool:
        if not any(log.id == log_id for log in self._daily_logs):
            return False
        self._daily_logs = tuple(replace(log, content=content) if log.id == log_id else log for log in self._daily_logs)
        return True

    def delete_daily_log(self, log_id: str) -> bool:
        kept = tuple(log for log in self._daily_logs if log.id != log_id)
        if len(kept) == len(self._daily_logs):
            return False
        self._daily_logs = kept
        return True

    # --- persisted state ---------------------------------------------------

    def export_state(self) -> Dict[str, Any]:
        out = dict(self._extra)
        out.update(
            {
                "version": LATEST_STATE_VERSION,
                "goals": [goal_to_dict(g) for g in self._goals],
                "activeGoalId": self._active_goal_id,
                "taskOrder": list(self._task_order),
                "dailyLogs": [daily_log_to_dict(log) for log in self._daily_logs],
            }
        )
        return out

    @classmethod
    def from_state(
        cls,
        state: Dict[str, Any],
        *,
        clock: Optional[Clock] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> "GoalStore":
        """Build a store from a persisted state of any supported version."""
        st = upgrade_state(state)
        order = st.get("taskOrder")
        active = st.get("activeGoalId")
        store = cls(
            normalize_goals(st.get("goals")),
            [x for x in order if isinstance(x, str)] if isinstance(order, list) else [],
            active if isinstance(active, str) and active else None,
            normalize_daily_logs(st.get("dailyLogs")),
            clock=clock,
            id_factory=id_factory,
        )
        store._extra = {k: v for k, v in st.items() if k not in _OWN_KEYS}
        return store
