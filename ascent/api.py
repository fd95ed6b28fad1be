"""ascent.api

Stable *library* entrypoint for ascent.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

from ascent.agenda import build_agenda, day_view
from ascent.layout import layout
from ascent.model import (
    DailyLog,
    DayAgenda,
    Goal,
    Occurrence,
    PositionedOccurrence,
    SubGoal,
    TaskItem,
    TimedOccurrence,
)
from ascent.recurrence import has_time, occurs_on, project, to_timed
from ascent.schema import LATEST_STATE_VERSION, upgrade_state
from ascent.store import GoalStore
from ascent.taskqueue import derive_queue, effective_priority, update_order
from ascent.validate import StateValidationError, assert_valid_state, validate_state

JsonPath = Union[str, Path]
State = Dict[str, Any]


def normalize_state(state: State, *, validate: bool = True) -> State:
    """Upgrade an in-memory state to the latest version and optionally validate it."""
    if not isinstance(state, dict):
        raise TypeError(f"state must be a dict/object; got {type(state).__name__}")
    out = upgrade_state(state)
    if validate:
        assert_valid_state(out)
    return out


def load_state_from_json(path: JsonPath, *, validate: bool = True) -> GoalStore:
    """Load a persisted state file into a GoalStore (migrations applied)."""
    p = Path(path)
    state = json.loads(p.read_text(encoding="utf-8", errors="replace"))
    if not isinstance(state, dict):
        raise ValueError(f"JSON state must be an object/dict; got {type(state).__name__}")
    return GoalStore.from_state(normalize_state(state, validate=validate))


def save_state_to_json(store: GoalStore, path: JsonPath, *, pretty: bool = True) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    txt = json.dumps(store.export_state(), ensure_ascii=False, indent=2 if pretty else None)
    p.write_text(txt + "\n", encoding="utf-8", newline="\n")
    return p


# --- Public API exports (locked by contract tests) ------------------------
# Keep changes intentional and reviewable.
_PUBLIC_EXPORTS = (
    "DailyLog",
    "DayAgenda",
    "Goal",
    "GoalStore",
    "LATEST_STATE_VERSION",
    "Occurrence",
    "PositionedOccurrence",
    "StateValidationError",
    "SubGoal",
    "TaskItem",
    "TimedOccurrence",
    "assert_valid_state",
    "build_agenda",
    "day_view",
    "derive_queue",
    "effective_priority",
    "has_time",
    "layout",
    "load_state_from_json",
    "normalize_state",
    "occurs_on",
    "project",
    "save_state_to_json",
    "to_timed",
    "update_order",
    "upgrade_state",
    "validate_state",
)

__all__ = [n for n in _PUBLIC_EXPORTS if n in globals()]
# --- /Public API exports --------------------------------------------------
