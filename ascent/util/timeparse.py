# ascent/util/timeparse.py
from __future__ import annotations

import datetime as dt
import re
from typing import Optional, Tuple

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?$")
_YMD_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


def parse_hhmm(s: str) -> Tuple[int, int]:
    m = _HHMM_RE.match(s.strip())
    if not m:
        raise ValueError(f"Invalid HH:MM: {s!r}")
    hh = int(m.group(1))
    mm = int(m.group(2))
    if not (0 <= hh <= 23 and 0 <= mm <= 59):
        raise ValueError(f"Invalid HH:MM: {s!r}")
    return hh, mm


def parse_window(s: str) -> Tuple[int, int]:
    """Parse a visible window like "06:00-24:00" into minutes from midnight.

    "24:00" is accepted as the end of the day.
    """
    parts = s.split("-")
    if len(parts) != 2:
        raise ValueError("window must be like 06:00-24:00")
    sh, sm = parse_hhmm(parts[0])
    end_s = parts[1].strip()
    if end_s in ("24:00", "24:00:00"):
        end = 1440
    else:
        eh, em = parse_hhmm(end_s)
        end = eh * 60 + em
    start = sh * 60 + sm
    if end <= start:
        raise ValueError("window end must be after start")
    return start, end


def parse_date_yyyy_mm_dd(s: str) -> dt.date:
    return dt.datetime.strptime(s, "%Y-%m-%d").date()


def date_part(s: Optional[str]) -> Optional[dt.date]:
    """Calendar date at the head of an ISO string ("2024-01-05", "2024-01-05T09:30").

    The date is read as written; no timezone conversion is applied.
    """
    if not s:
        return None
    m = _YMD_RE.match(str(s).strip())
    if not m:
        return None
    try:
        return dt.date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def time_of_day_min(s: Optional[str]) -> Optional[int]:
    """Minutes from midnight of the time component of "YYYY-MM-DDTHH:MM[...]".

    Values without a date component carry no usable time for projection and
    return None, as do unparseable ones.
    """
    if not s or "T" not in s:
        return None
    _, _, tail = str(s).partition("T")
    try:
        hh, mm = parse_hhmm(tail)
    except ValueError:
        return None
    return hh * 60 + mm


def parse_iso_to_epoch_ms(s: Optional[str]) -> Optional[int]:
    """Epoch ms for an ISO timestamp; naive values are read as UTC."""
    if not s:
        return None
    try:
        d = dt.datetime.fromisoformat(str(s).strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if d.tzinfo is None:
        d = d.replace(tzinfo=dt.timezone.utc)
    return int(d.timestamp() * 1000)


def format_hhmm(minutes: int) -> str:
    h = int(minutes) // 60
    m = int(minutes) % 60
    return f"{h:02d}:{m:02d}"
