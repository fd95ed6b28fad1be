# ascent/layout.py
from __future__ import annotations

from typing import Iterable, List

from .model import DAY_MIN, PositionedOccurrence, TimedOccurrence


def _clusters(items: List[TimedOccurrence]) -> List[List[TimedOccurrence]]:
    groups: List[List[TimedOccurrence]] = []
    cur: List[TimedOccurrence] = []
    max_end = -1
    for it in items:
        if cur and it.start < max_end:
            cur.append(it)
            max_end = max(max_end, it.end)
            continue
        if cur:
            groups.append(cur)
        cur = [it]
        max_end = it.end
    if cur:
        groups.append(cur)
    return groups


def layout(
    items: Iterable[TimedOccurrence],
    *,
    view_start: int = 0,
    view_end: int = DAY_MIN,
) -> List[PositionedOccurrence]:
    """Assign overlap columns to one day's timed occurrences.

    Items are sorted by start, longer first on ties, and swept into clusters
    of transitively overlapping intervals. Inside a cluster each item takes
    the lowest column whose last item has ended by its start; every item in
    the cluster reports the cluster's column count.

    Items with nothing inside [view_start, view_end) still claim a column but
    are left out of the result.
    """
    ordered = sorted(items, key=lambda x: (x.start, -(x.end - x.start)))

    out: List[PositionedOccurrence] = []
    for cluster_id, group in enumerate(_clusters(ordered)):
        lane_ends: List[int] = []
        lanes: List[int] = []
        for it in group:
            lane = next((i for i, end in enumerate(lane_ends) if end <= it.start), -1)
            if lane < 0:
                lane = len(lane_ends)
                lane_ends.append(it.end)
            else:
                lane_ends[lane] = it.end
            lanes.append(lane)

        total = max(1, len(lane_ends))
        for it, lane in zip(group, lanes):
            vis_start = max(it.start, view_start)
            vis_end = min(it.end, view_end)
            if vis_start >= vis_end:
                continue
            out.append(
                PositionedOccurrence(
                    item=it,
                    column=lane,
                    column_count=total,
                    cluster_id=cluster_id,
                    visible_start=vis_start,
                    visible_end=vis_end,
                )
            )
    return out
