"""
Display formatting helpers
"""

from datetime import datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

DISPLAY_FORMAT = "%d/%m/%Y, %H:%M:%S"


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse a store timestamp; naive values are taken as UTC"""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def format_timestamp(value: Union[str, datetime, None], tz_name: str = "America/Mexico_City") -> str:
    """Render a timestamp for display in the configured zone (es-MX style)"""
    parsed = parse_timestamp(value)
    if parsed is None:
        return ""
    return parsed.astimezone(ZoneInfo(tz_name)).strftime(DISPLAY_FORMAT)
