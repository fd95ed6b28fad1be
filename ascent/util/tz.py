# ascent/util/tz.py
"""Which calendar day is "today" for the CLI (--tz / ASCENT_TZ)."""

from __future__ import annotations

import datetime as dt
import re
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def normalize_tz_name(name: Optional[str]) -> str:
    """Blank means the machine's zone ("local"); "UTC"/"Z" in any case means UTC."""
    s = (name or "").strip()
    if not s or s.lower() == "local":
        return "local"
    if s.upper() in ("UTC", "Z"):
        return "UTC"
    return s


def _fixed_offset(m: "re.Match[str]", raw: str) -> dt.tzinfo:
    sign, hh, mm = m.group(1), int(m.group(2)), int(m.group(3))
    if hh > 23 or mm > 59:
        raise ValueError(f"Invalid timezone offset: {raw!r}")
    minutes = hh * 60 + mm
    return dt.timezone(dt.timedelta(minutes=minutes if sign == "+" else -minutes))


def resolve_tz(name: Optional[str]) -> dt.tzinfo:
    """tzinfo for "local", "UTC", "+HH:MM" offsets or an IANA zone name.

    Raises ValueError when the name resolves to nothing.
    """
    tz_name = normalize_tz_name(name)
    if tz_name == "local":
        return dt.datetime.now().astimezone().tzinfo or dt.timezone.utc
    if tz_name == "UTC":
        return dt.timezone.utc

    m = _OFFSET_RE.match(tz_name)
    if m:
        return _fixed_offset(m, tz_name)
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as ex:
        raise ValueError(f"Invalid timezone identifier: {tz_name!r}") from ex


def today_date(tz: dt.tzinfo) -> dt.date:
    return dt.datetime.now(tz=tz).date()
