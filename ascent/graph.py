# ascent/graph.py
"""Goal graph traversal over a flat id -> Goal table.

Parent links may dangle or form cycles; every walk here keeps a visited set
and skips ids that are not in the table.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from .model import Goal


def index_goals(goals: Iterable[Goal]) -> Dict[str, Goal]:
    return {g.id: g for g in goals}


def goal_root(goal_id: str, by_id: Dict[str, Goal]) -> Optional[Goal]:
    """Topmost ancestor reached by following the first existing parent edge.

    Returns None when the goal has no existing parent, or when a cycle is hit
    before reaching a goal without parents.
    """
    cur = by_id.get(goal_id)
    if cur is None:
        return None

    visited = {cur.id}
    start = cur
    while True:
        nxt = next((by_id[p] for p in cur.parent_ids if p in by_id), None)
        if nxt is None:
            return None if cur is start else cur
        if nxt.id in visited:
            return None
        visited.add(nxt.id)
        cur = nxt

