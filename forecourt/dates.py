# forecourt/dates.py
"""UK-style (DD/MM/YYYY) calendar dates used for sold dates."""
import re
from datetime import date, datetime
from typing import Any, Optional

MIN_YEAR = 2000
MAX_YEAR = 2100

_INT_RE = re.compile(r"\d+", re.ASCII)


def _component(part: str) -> Optional[int]:
    part = part.strip()
    if not _INT_RE.fullmatch(part):
        return None
    return int(part)


def parse_uk_date(value: Any) -> Optional[date]:
    """Parse `DD/MM/YYYY` into a date, or return None if it isn't a real one."""
    if not value:
        return None
    parts = str(value).strip().split("/")
    if len(parts) != 3:
        return None

    day, month, year = (_component(p) for p in parts)
    if day is None or month is None or year is None:
        return None
    if not (1 <= day <= 31 and 1 <= month <= 12 and MIN_YEAR <= year <= MAX_YEAR):
        return None

    # date() rejects day-of-month overflow such as 31/02
    try:
        return date(year, month, day)
    except ValueError:
        return None


def format_uk_date(d: date) -> str:
    return d.strftime("%d/%m/%Y")


def today_uk(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    if now.tzinfo is not None:
        now = now.astimezone()
    return format_uk_date(now.date())
