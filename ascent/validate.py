"""Persisted state validation helpers (library-facing)."""

from __future__ import annotations

from typing import Any, Dict, List

from ascent.model import PRIORITIES, RECURRENCES
from ascent.schema import LATEST_STATE_VERSION


class StateValidationError(ValueError):
    """Raised when a persisted state fails validation."""


def _require(cond: bool, msg: str, errs: List[str]) -> None:
    if not cond:
        errs.append(msg)


def _validate_goal(g: Any, i: int, label: str, errs: List[str]) -> None:
    if not isinstance(g, dict):
        errs.append(f"{label}: goals[{i}] must be dict")
        return
    gid = g.get("id")
    _require(isinstance(gid, str) and bool(gid.strip()), f"{label}: goals[{i}].id must be non-empty string", errs)
    _require(isinstance(g.get("parentIds"), list), f"{label}: goals[{i}].parentIds must be list", errs)
    _require(isinstance(g.get("subGoals"), list), f"{label}: goals[{i}].subGoals must be list", errs)
    _require(
        g.get("priority") in PRIORITIES,
        f"{label}: goals[{i}].priority must be one of {', '.join(PRIORITIES)}",
        errs,
    )
    rec = g.get("recurrence")
    if rec is not None:
        _require(rec in RECURRENCES, f"{label}: goals[{i}].recurrence must be one of {', '.join(RECURRENCES)}", errs)
    dur = g.get("duration")
    if dur is not None:
        _require(
            isinstance(dur, (int, float)) and not isinstance(dur, bool) and dur > 0,
            f"{label}: goals[{i}].duration must be a positive number",
            errs,
        )
    subs = g.get("subGoals")
    if isinstance(subs, list):
        for j, sg in enumerate(subs):
            if not isinstance(sg, dict):
                errs.append(f"{label}: goals[{i}].subGoals[{j}] must be dict")
                continue
            sid = sg.get("id")
            _require(
                isinstance(sid, str) and bool(sid.strip()),
                f"{label}: goals[{i}].subGoals[{j}].id must be non-empty string",
                errs,
            )


def validate_state(state: Dict[str, Any], *, label: str = "state") -> List[str]:
    """Structural checks for a state at the latest version. Returns error strings."""
    if not isinstance(state, dict):
        return [f"{label}: state must be a dict/object"]

    errs: List[str] = []
    v = state.get("version")
    if isinstance(v, int) and v > LATEST_STATE_VERSION:
        return [f"Unsupported state version: {v} (latest={LATEST_STATE_VERSION})"]
    _require(v == LATEST_STATE_VERSION, f"{label}: version must be {LATEST_STATE_VERSION}", errs)

    goals = state.get("goals")
    order = state.get("taskOrder")
    active = state.get("activeGoalId")

    _require(isinstance(goals, list), f"{label}: goals must be list", errs)
    _require(isinstance(order, list), f"{label}: taskOrder must be list", errs)
    _require(active is None or isinstance(active, str), f"{label}: activeGoalId must be string or null", errs)

    if isinstance(goals, list):
        seen: set[str] = set()
        for i, g in enumerate(goals):
            _validate_goal(g, i, label, errs)
            gid = g.get("id") if isinstance(g, dict) else None
            if isinstance(gid, str) and gid:
                if gid in seen:
                    errs.append(f"{label}: duplicate goal id: {gid!r}")
                seen.add(gid)

    if isinstance(order, list):
        for i, x in enumerate(order):
            if not isinstance(x, str):
                errs.append(f"{label}: taskOrder[{i}] must be string")
                break

    logs = state.get("dailyLogs")
    if logs is not None:
        _require(isinstance(logs, list), f"{label}: dailyLogs must be list", errs)
        for i, log in enumerate(logs if isinstance(logs, list) else []):
            lid = log.get("id") if isinstance(log, dict) else None
            _require(isinstance(lid, str) and bool(lid.strip()), f"{label}: dailyLogs[{i}].id must be non-empty string", errs)

    return errs


def assert_valid_state(state: Dict[str, Any]) -> None:
    if not isinstance(state, dict):
        raise StateValidationError("state must be a JSON object")
    errs = validate_state(state, label="state")
    if errs:
        raise StateValidationError(errs[0])


__all__ = [
    "LATEST_STATE_VERSION",
    "StateValidationError",
    "assert_valid_state",
    "validate_state",
]
