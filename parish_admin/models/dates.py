from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(s: Optional[str]) -> Optional[datetime]:
    """
    Parse the API's date/timestamp strings into aware UTC datetimes.

    Accepts:
      2025-12-29
      2025-12-29T10:00:00
      2025-12-29T10:00:00.000Z
      2025-12-29T10:00:00+02:00
    Naive values are taken as UTC. Returns None when unparseable.
    """
    if not s:
        return None
    raw = str(s).strip()
    if not raw:
        return None
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        if len(raw) == 10:  # YYYY-MM-DD
            dt = datetime.fromisoformat(raw + "T00:00:00")
        else:
            dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
