# ascent/taskqueue.py
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Set

from .graph import goal_root, index_goals
from .model import DEFAULT_PRIORITY, PRIORITY_RANK, Goal, TaskItem
from .util.timeparse import parse_iso_to_epoch_ms


def _rank(priority: str) -> int:
    return PRIORITY_RANK.get(priority, PRIORITY_RANK[DEFAULT_PRIORITY])


def container_ids(goals: Iterable[Goal]) -> Set[str]:
    """Ids named as a parent by some other incomplete goal."""
    out: Set[str] = set()
    for g in goals:
        if g.is_completed:
            continue
        for pid in g.parent_ids:
            if pid != g.id:
                out.add(pid)
    return out


def _effective_priority(goal: Goal, incomplete_by_id: Dict[str, Goal]) -> str:
    """Most urgent priority among the goal and its incomplete ancestors.

    The walk only passes through incomplete goals; completed or missing
    parents end that chain.
    """
    best = goal.priority
    visited = {goal.id}
    stack = list(goal.parent_ids)
    while stack:
        pid = stack.pop()
        if pid in visited:
            continue
        visited.add(pid)
        parent = incomplete_by_id.get(pid)
        if parent is None:
            continue
        if _rank(parent.priority) < _rank(best):
            best = parent.priority
        stack.extend(parent.parent_ids)
    return best


def effective_priority(goal: Goal, goals: Iterable[Goal]) -> str:
    """Effective priority of `goal` within the graph `goals`."""
    return _effective_priority(goal, index_goals(g for g in goals if not g.is_completed))


def derive_queue(goals: Sequence[Goal], custom_order: Sequence[str] = ()) -> List[TaskItem]:
    """Ordered actionable work items.

    Custom-order ids come first in their given order (stale, blocked or
    repeated ids are dropped); remaining leaves follow by effective priority,
    then newest first.
    """
    by_id = index_goals(goals)
    incomplete = [g for g in goals if not g.is_completed]
    incomplete_by_id = index_goals(incomplete)
    blocked = container_ids(incomplete)

    def _item(g: Goal) -> TaskItem:
        return TaskItem(goal=g, root=goal_root(g.id, by_id))

    out: List[TaskItem] = []
    placed: Set[str] = set()
    for gid in custom_order:
        if gid in placed or gid in blocked:
            continue
        g = incomplete_by_id.get(gid)
        if g is None:
            continue
        out.append(_item(g))
        placed.add(gid)

    remaining = [g for g in incomplete if g.id not in blocked and g.id not in placed]
    remaining.sort(
        key=lambda g: (
            _rank(_effective_priority(g, incomplete_by_id)),
            -(parse_iso_to_epoch_ms(g.created_at) or 0),
        )
    )
    out.extend(_item(g) for g in remaining)
    return out


def update_order(items: Iterable[TaskItem]) -> List[str]:
    """Id sequence to persist as the custom task order."""
    return [it.goal.id for it in items]
