from __future__ import annotations

import re
from datetime import timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from solarlog_monitor.errors import InvalidTimezoneError


DEFAULT_TIMEZONE = "+0000"

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def resolve_timezone(raw: str | tzinfo | None) -> tzinfo:
    """
    Turn a timezone descriptor into a tzinfo.

    Accepts a tzinfo as-is, "+HHMM"/"+HH:MM" offsets, IANA names
    ("Europe/Berlin") and None/empty for UTC.
    """
    if isinstance(raw, tzinfo):
        return raw
    if raw is None:
        return timezone.utc

    text = str(raw).strip()
    if not text or text.upper() in ("UTC", "Z"):
        return timezone.utc

    match = _OFFSET_RE.match(text)
    if match:
        sign, hours, minutes = match.groups()
        if int(hours) > 23 or int(minutes) > 59:
            raise InvalidTimezoneError(f"Timezone offset out of range: {text}")
        delta = timedelta(hours=int(hours), minutes=int(minutes))
        return timezone(-delta if sign == "-" else delta)

    # Directory keys such as "Europe" raise IsADirectoryError before 3.12.
    try:
        return ZoneInfo(text)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidTimezoneError(f"Unknown timezone: {text}") from exc
