# ascent/schema.py
"""Persisted state migrations.

State files carry an integer "version". Each step below lifts a state from
version N-1 to N; steps are additive, and keys they do not know about are
carried through untouched.
"""

from __future__ import annotations

import datetime as dt
import uuid
from typing import Any, Callable, Dict, List, Optional

LATEST_STATE_VERSION = 10

State = Dict[str, Any]


def _now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _legacy_goals(state: State) -> tuple[List[Dict[str, Any]], Optional[str]]:
    """Pre-graph states stored one `currentGoal` string plus `completedGoals`."""
    goals: List[Dict[str, Any]] = []
    active: Optional[str] = None

    current = state.get("currentGoal")
    if isinstance(current, str) and current:
        gid = uuid.uuid4().hex
        goals.append(
            {
                "id": gid,
                "content": current,
                "parentIds": [],
                "isCompleted": False,
                "createdAt": _now_iso(),
                "isToday": True,
                "subGoals": [],
                "position": {"x": 0, "y": 0},
            }
        )
        active = gid

    completed = state.get("completedGoals")
    for i, cg in enumerate(completed if isinstance(completed, list) else []):
        if not isinstance(cg, dict):
            continue
        goals.append(
            {
                "id": cg.get("id") or uuid.uuid4().hex,
                "content": cg.get("content") or "",
                "parentIds": [],
                "isCompleted": True,
                "completedAt": cg.get("completedAt"),
                "createdAt": cg.get("completedAt") or "",
                "isToday": False,
                "subGoals": [],
                "position": {"x": (i + 1) * 200, "y": 0},
            }
        )
    return goals, active


def apply_state_v3(state: State) -> State:
    """Multi-parent graph: `parentId` -> `parentIds`, subGoals always present."""
    out = dict(state)
    goals_in = state.get("goals")
    if isinstance(goals_in, list):
        goals = []
        for g in goals_in:
            if not isinstance(g, dict):
                continue
            g2 = dict(g)
            if not isinstance(g2.get("parentIds"), list):
                pid = g2.get("parentId")
                g2["parentIds"] = [pid] if pid else []
            g2.pop("parentId", None)
            if not isinstance(g2.get("subGoals"), list):
                g2["subGoals"] = []
            goals.append(g2)
        out["goals"] = goals
    else:
        goals, active = _legacy_goals(state)
        out["goals"] = goals
        out["activeGoalId"] = active
    out.setdefault("activeGoalId", None)
    return out


def apply_state_v4(state: State) -> State:
    """Priorities (default P2)."""
    out = dict(state)
    goals = state.get("goals")
    out["goals"] = [
        dict(g, priority=g.get("priority") or "P2")
        for g in (goals if isinstance(goals, list) else [])
        if isinstance(g, dict)
    ]
    out["focusedGoalId"] = None
    return out


def apply_state_v5(state: State) -> State:
    """Custom task order."""
    out = dict(state)
    if not isinstance(out.get("taskOrder"), list):
        out["taskOrder"] = []
    return out


def _bump(state: State) -> State:
    # Version-only steps: the fields they introduced are optional or belong
    # to the UI and need no rewrite here.
    return dict(state)


_STEPS: Dict[int, Callable[[State], State]] = {
    3: apply_state_v3,
    4: apply_state_v4,
    5: apply_state_v5,
    6: _bump,   # focus list
    7: _bump,   # dashboard view mode
    8: _bump,   # timeline date
    9: _bump,   # subgoal scheduledTime/duration
    10: _bump,  # timeline date fix
}


def _coerce_version(v: Any) -> int:
    if isinstance(v, bool):
        return 0
    if isinstance(v, int):
        return v
    if isinstance(v, str):
        try:
            return int(float(v))
        except ValueError:
            return 0
    return 0


def upgrade_state(state: Any, target_version: Optional[int] = None) -> State:
    """Upgrade a persisted state to target_version (default: latest). Never downgrades.

    Versions 0-2 all go through the v3 step, which also converts legacy
    single-goal states.
    """
    if not isinstance(state, dict):
        raise TypeError(f"state must be dict; got {type(state).__name__}")

    target = LATEST_STATE_VERSION if target_version is None else int(target_version)
    cur = _coerce_version(state.get("version"))

    if target > LATEST_STATE_VERSION:
        raise ValueError(f"Unsupported state version: {target} (latest={LATEST_STATE_VERSION})")
    if cur > LATEST_STATE_VERSION:
        raise ValueError(f"Unsupported input state version: {cur} (latest={LATEST_STATE_VERSION})")
    if cur >= target:
        return state

    out = dict(state)
    v = max(cur, 2)
    while v < target:
        v += 1
        out = _STEPS[v](out)
        out["version"] = v
    return out


if __name__ == "__main__":
    raise SystemExit("ascent.schema is a library module")
