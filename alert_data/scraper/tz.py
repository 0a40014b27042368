from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TIMEZONE = "Europe/Kyiv"

# Placeholder timestamp for regions without any observation yet
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


def load_timezone(name: Optional[str] = None) -> ZoneInfo:
    """
    Load the channel timezone. All message dates are interpreted in it.
    Raises ValueError for an unknown zone name.
    """
    name = name or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"unable to load {name} timezone: {e}") from e
