from __future__ import annotations

import argparse
import dataclasses
import datetime as dt
import json
import os
import sys
from pathlib import Path
from typing import Any, List, Optional

from .agenda import AGENDA_DAYS, build_agenda, day_view
from .api import load_state_from_json, save_state_to_json
from .model import DayAgenda, PositionedOccurrence, TaskItem
from .schema import upgrade_state
from .store import GoalStore
from .taskqueue import derive_queue, effective_priority
from .util.timeparse import format_hhmm, parse_date_yyyy_mm_dd, parse_window
from .util.tz import normalize_tz_name, resolve_tz, today_date
from .validate import validate_state


def _default_state_path() -> str:
    env = (os.getenv("ASCENT_STATE", "") or "").strip()
    if env:
        return env
    return str(Path.home() / ".ascent" / "state.json")


def _die(msg: str, rc: int = 2) -> int:
    print(f"[ascent] ERROR: {msg}", file=sys.stderr)
    return rc


def _resolve_day(s: Optional[str], tz_name: str) -> dt.date:
    if s:
        try:
            return parse_date_yyyy_mm_dd(s)
        except ValueError:
            raise SystemExit(f"Invalid date (expected YYYY-MM-DD): {s!r}")
    try:
        return today_date(resolve_tz(tz_name))
    except ValueError as e:
        raise SystemExit(f"Invalid --tz value: {e}")


def _load(path: str) -> GoalStore:
    p = Path(path)
    if not p.exists():
        return GoalStore()
    return load_state_from_json(p)


def _queue_rows(store: GoalStore, items: List[TaskItem]) -> List[dict]:
    return [
        {
            "id": it.goal.id,
            "content": it.goal.content,
            "priority": it.goal.priority,
            "effective_priority": effective_priority(it.goal, store.goals),
            "root": it.root.content if it.root else None,
        }
        for it in items
    ]


def _day_rows(placed: List[PositionedOccurrence]) -> List[dict]:
    rows = []
    for p in placed:
        occ = p.item.occurrence
        rows.append(
            {
                "id": p.id,
                "kind": occ.kind if occ else None,
                "content": occ.content if occ else "",
                "start": format_hhmm(p.start),
                "end": format_hhmm(p.end),
                "column": p.column,
                "column_count": p.column_count,
            }
        )
    return rows


def _agenda_rows(days: List[DayAgenda]) -> List[dict]:
    return [{"date": d.date, "items": [dataclasses.asdict(o) for o in d.items]} for d in days]


def _emit_json(obj: Any) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def cmd_queue(ns: argparse.Namespace) -> int:
    store = _load(ns.state)
    items = derive_queue(store.goals, store.task_order)
    rows = _queue_rows(store, items)
    if ns.json:
        _emit_json(rows)
        return 0
    for r in rows:
        root = f"  [{r['root']}]" if r["root"] else ""
        print(f"{r['effective_priority']}  {r['content']}{root}")
    return 0


def cmd_day(ns: argparse.Namespace) -> int:
    day = _resolve_day(ns.date, ns.tz)
    try:
        start, end = parse_window(ns.window)
    except ValueError as e:
        raise SystemExit(f"Invalid --window value: {e}")
    store = _load(ns.state)
    rows = _day_rows(day_view(store.goals, day, view_start=start, view_end=end))
    if ns.json:
        _emit_json({"date": day.isoformat(), "items": rows})
        return 0
    print(day.isoformat())
    for r in rows:
        print(f"  {r['start']}-{r['end']}  [{r['column'] + 1}/{r['column_count']}]  {r['content']}")
    return 0


def cmd_agenda(ns: argparse.Namespace) -> int:
    start = _resolve_day(ns.start, ns.tz)
    store = _load(ns.state)
    days = build_agenda(store.goals, start, days=int(ns.days), hide_daily=bool(ns.hide_daily))
    if ns.json:
        _emit_json(_agenda_rows(days))
        return 0
    for d in days:
        print(d.date)
        for o in d.items:
            when = format_hhmm(o.time_of_day) if o.time_of_day is not None else "anytime"
            mark = "x" if o.is_completed else " "
            tags = f"  ({', '.join(o.tags)})" if o.tags else ""
            print(f"  [{mark}] {when:>7}  {o.content}{tags}")
    return 0


def cmd_upgrade(ns: argparse.Namespace) -> int:
    p = Path(ns.state)
    if not p.exists():
        return _die(f"Missing state file: {p}")
    try:
        raw = json.loads(p.read_text(encoding="utf-8", errors="replace"))
        store = GoalStore.from_state(upgrade_state(raw))
    except Exception as e:
        return _die(f"Failed to upgrade state: {p} ({e})")
    out = save_state_to_json(store, ns.out or p)
    print(f"[ascent] OK: wrote {out}")
    return 0


def cmd_validate(ns: argparse.Namespace) -> int:
    p = Path(ns.state)
    if not p.exists():
        return _die(f"Missing state file: {p}")
    try:
        raw = json.loads(p.read_text(encoding="utf-8", errors="replace"))
        state = upgrade_state(raw) if ns.upgrade else raw
    except Exception as e:
        return _die(f"Failed to read state: {p} ({e})")
    errs = validate_state(state)
    if errs:
        for e in errs:
            print(f"[ascent] ERROR: {e}", file=sys.stderr)
        return 2
    print(f"[ascent] OK: {p}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="ascent", description="Goal graph task queue and day planner.")
    ap.add_argument(
        "--state",
        default=_default_state_path(),
        help="State JSON path (default: env ASCENT_STATE or ~/.ascent/state.json)",
    )
    ap.add_argument(
        "--tz",
        default=normalize_tz_name(os.getenv("ASCENT_TZ", "local")),
        help="Timezone used to resolve 'today' (default: env ASCENT_TZ or 'local')",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    q = sub.add_parser("queue", help="Print actionable goals in queue order")
    q.add_argument("--json", action="store_true", help="JSON output")
    q.set_defaults(func=cmd_queue)

    d = sub.add_parser("day", help="Print the timeline for one date with overlap columns")
    d.add_argument("--date", default=None, help="Date YYYY-MM-DD (default: today in --tz)")
    d.add_argument("--window", default="06:00-24:00", help="Visible window (default: 06:00-24:00)")
    d.add_argument("--json", action="store_true", help="JSON output")
    d.set_defaults(func=cmd_day)

    a = sub.add_parser("agenda", help="Print the agenda for the next days")
    a.add_argument("--start", default=None, help="First date YYYY-MM-DD (default: today in --tz)")
    a.add_argument("--days", type=int, default=AGENDA_DAYS, help=f"Number of days (default: {AGENDA_DAYS})")
    a.add_argument("--hide-daily", action="store_true", help="Leave out daily recurring goals")
    a.add_argument("--json", action="store_true", help="JSON output")
    a.set_defaults(func=cmd_agenda)

    u = sub.add_parser("upgrade", help="Migrate a state file to the latest version")
    u.add_argument("--out", default=None, help="Output path (default: rewrite --state in place)")
    u.set_defaults(func=cmd_upgrade)

    v = sub.add_parser("validate", help="Validate a state file")
    v.add_argument("--upgrade", action="store_true", help="Migrate before validating")
    v.set_defaults(func=cmd_validate)

    return ap


def main(argv: list[str] | None = None) -> int:
    ns = build_parser().parse_args(argv)
    try:
        return int(ns.func(ns))
    except (ValueError, OSError) as e:
        return _die(str(e))


if __name__ == "__main__":
    raise SystemExit(main())
