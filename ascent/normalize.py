# ascent/normalize.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from .model import DEFAULT_PRIORITY, PRIORITIES, RECURRENCES, DailyLog, Goal, SubGoal
from .util.console import eprint, obs_enabled
from .util.timeparse import date_part, parse_iso_to_epoch_ms


def _opt_str(v: Any) -> Optional[str]:
    if not isinstance(v, str):
        return None
    s = v.strip()
    return s or None


def _opt_duration(v: Any) -> Optional[int]:
    # bool is an int subclass; reject it explicitly
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    n = int(v)
    return n if n > 0 else None


def _parent_ids(g: Dict[str, Any]) -> Tuple[str, ...]:
    raw = g.get("parentIds")
    if raw is None and g.get("parentId"):
        raw = [g.get("parentId")]
    if not isinstance(raw, list):
        return ()
    out: List[str] = []
    for pid in raw:
        if isinstance(pid, str) and pid and pid not in out:
            out.append(pid)
    return tuple(out)


def _position(v: Any) -> Tuple[float, float]:
    if isinstance(v, dict):
        try:
            return float(v.get("x") or 0), float(v.get("y") or 0)
        except (TypeError, ValueError):
            return 0.0, 0.0
    return 0.0, 0.0


def normalize_sub_goal(sg: Dict[str, Any]) -> Optional[SubGoal]:
    sid = str(sg.get("id") or "").strip()
    if not sid:
        return None
    return SubGoal(
        id=sid,
        content=str(sg.get("content") or ""),
        is_completed=bool(sg.get("isCompleted")),
        scheduled_time=_opt_str(sg.get("scheduledTime")),
        duration=_opt_duration(sg.get("duration")),
    )


def normalize_goal(g: Dict[str, Any]) -> Optional[Goal]:
    """Build a Goal from its persisted (camelCase) shape.

    Returns None when the record has no id. Missing or invalid optional
    fields fall back to their defaults.
    """
    gid = str(g.get("id") or "").strip()
    if not gid:
        return None

    priority = str(g.get("priority") or DEFAULT_PRIORITY)
    if priority not in PRIORITIES:
        priority = DEFAULT_PRIORITY

    recurrence = str(g.get("recurrence") or "none").strip().lower()
    if recurrence not in RECURRENCES:
        recurrence = "none"

    created_at = str(g.get("createdAt") or "")
    scheduled_time = _opt_str(g.get("scheduledTime"))
    start_date = _opt_str(g.get("startDate"))
    end_date = _opt_str(g.get("endDate"))

    if obs_enabled():
        if created_at and parse_iso_to_epoch_ms(created_at) is None:
            eprint(f"[ascent.normalize] WARN: invalid createdAt id={gid!r} value={created_at!r}")
        if start_date and date_part(start_date) is None:
            eprint(f"[ascent.normalize] WARN: invalid startDate id={gid!r} value={start_date!r}")
        if end_date and date_part(end_date) is None:
            eprint(f"[ascent.normalize] WARN: invalid endDate id={gid!r} value={end_date!r}")

    subs_raw = g.get("subGoals") or []
    subs: List[SubGoal] = []
    for sg in subs_raw if isinstance(subs_raw, list) else []:
        if not isinstance(sg, dict):
            continue
        s = normalize_sub_goal(sg)
        if s is not None:
            subs.append(s)

    return Goal(
        id=gid,
        content=str(g.get("content") or ""),
        parent_ids=_parent_ids(g),
        is_completed=bool(g.get("isCompleted")),
        priority=priority,
        created_at=created_at,
        completed_at=_opt_str(g.get("completedAt")),
        is_today=bool(g.get("isToday")),
        scheduled_time=scheduled_time,
        duration=_opt_duration(g.get("duration")),
        start_date=start_date,
        end_date=end_date,
        recurrence=recurrence,
        sub_goals=tuple(subs),
        position=_position(g.get("position")),
    )


def normalize_goals(raw: Any) -> List[Goal]:
    out: List[Goal] = []
    seen: set[str] = set()
    for i, g in enumerate(raw if isinstance(raw, list) else []):
        goal = normalize_goal(g) if isinstance(g, dict) else None
        if goal is None:
            if obs_enabled():
                eprint(f"[ascent.normalize] WARN: dropped malformed goal at index {i}")
            continue
        if goal.id in seen:
            if obs_enabled():
                eprint(f"[ascent.normalize] WARN: dropped duplicate goal id={goal.id!r}")
            continue
        seen.add(goal.id)
        out.append(goal)
    return out


def sub_goal_to_dict(sg: SubGoal) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": sg.id, "content": sg.content, "isCompleted": sg.is_completed}
    if sg.scheduled_time is not None:
        d["scheduledTime"] = sg.scheduled_time
    if sg.duration is not None:
        d["duration"] = sg.duration
    return d


def goal_to_dict(g: Goal) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": g.id,
        "content": g.content,
        "parentIds": list(g.parent_ids),
        "isCompleted": g.is_completed,
        "priority": g.priority,
        "createdAt": g.created_at,
        "isToday": g.is_today,
        "subGoals": [sub_goal_to_dict(sg) for sg in g.sub_goals],
        "position": {"x": g.position[0], "y": g.position[1]},
    }
    if g.completed_at is not None:
        d["completedAt"] = g.completed_at
    if g.scheduled_time is not None:
        d["scheduledTime"] = g.scheduled_time
    if g.duration is not None:
        d["duration"] = g.duration
    if g.start_date is not None:
        d["startDate"] = g.start_date
    if g.end_date is not None:
        d["endDate"] = g.end_date
    if g.recurrence != "none":
        d["recurrence"] = g.recurrence
    return d


def normalize_daily_logs(raw: Any) -> List[DailyLog]:
    """Daily logs in stored order; records without an id are dropped."""
    out: List[DailyLog] = []
    for i, d in enumerate(raw if isinstance(raw, list) else []):
        lid = str(d.get("id") or "").strip() if isinstance(d, dict) else ""
        if not lid:
            if obs_enabled():
                eprint(f"[ascent.normalize] WARN: dropped malformed daily log at index {i}")
            continue
        step = d.get("stepIndex")
        out.append(
            DailyLog(
                id=lid,
                date=str(d.get("date") or ""),
                content=str(d.get("content") or ""),
                step_index=step if isinstance(step, int) and not isinstance(step, bool) else i,
                target_goal_content=_opt_str(d.get("targetGoalContent")),
                linked_goal_id=_opt_str(d.get("linkedGoalId")),
            )
        )
    return out


def daily_log_to_dict(log: DailyLog) -> Dict[str, Any]:
    return {
        "id": log.id,
        "date": log.date,
        "content": log.content,
        "stepIndex": log.step_index,
        "targetGoalContent": log.target_goal_content,
        "linkedGoalId": log.linked_goal_id,
    }
