from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

PLAN_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
PLAN_TIMEZONE = ZoneInfo("Europe/Berlin")


def millis_to_seconds(millis: int) -> int:
    return millis // 1000


def format_utc_offset(value: datetime) -> str:
    offset = value.utcoffset()
    if offset is None or not offset:
        return "Z"
    total_minutes = int(offset.total_seconds()) // 60
    sign = "+" if total_minutes >= 0 else "-"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def plan_timestamp_to_wire(value: str) -> str:
    """Convert a plan timestamp (``yyyyMMddHHmmss``, Berlin local time) to the
    wire date format ``yyyy-MM-ddTHH:mm:ss.fffffff+HH:MM``.

    Raises ``ValueError`` when the value does not match the plan format.
    """
    local = datetime.strptime(str(value).strip(), PLAN_TIMESTAMP_FORMAT)
    # round trip through UTC moves wall-clock times inside a DST gap forward
    zoned = local.replace(tzinfo=PLAN_TIMEZONE).astimezone(timezone.utc)
    zoned = zoned.astimezone(PLAN_TIMEZONE)
    # seven fractional digits
    fraction = f"{zoned.microsecond * 10:07d}"
    return f"{zoned:%Y-%m-%dT%H:%M:%S}.{fraction}{format_utc_offset(zoned)}"
