"""
Parser for the alert channel's status lines.

A status message looks like

    🔴 08:39 Повітряна тривога в м. Київ
    Слідкуйте за подальшими повідомленнями.
    #м_Київ

Only the first line matching the grammar matters. Anything else (news posts,
unknown regions, media) is not a status update and parses to None.
"""

import logging
import re
from datetime import datetime, timedelta, tzinfo
from typing import Optional

from alert_data import region
from alert_data.region import RegionID
from alert_data.scraper.errors import MessageParseError
from alert_data.scraper.types import Message, MessageText, Status

logger = logging.getLogger(__name__)

ALERT_STATUS_RE = re.compile(
    r'^[🔴🟢🟡] (\d\d):(\d\d) (Відбій тривоги|Повітряна тривога) в (.*?)\.?$',
    re.MULTILINE,
)

ALERT_ENABLED_PHRASES = {
    "Повітряна тривога": True,
    "Відбій тривоги": False,
}

# A parsed time this far ahead of delivery belongs to the previous day;
# anything closer is treated as clock skew between poster and server.
ROLLBACK_GRACE = timedelta(minutes=5)


def resolve_timestamp(message_at: datetime, hour: int, minute: int) -> datetime:
    """
    Combine the delivery date with the announced time of day.

    A message delivered at 00:01 announcing 23:59 describes the previous
    evening, so the date moves back one day. Both times are compared as
    wall-clock times in the channel zone, also across DST changes.
    """
    updated_at = message_at.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if updated_at - message_at > ROLLBACK_GRACE:
        updated_at = (updated_at - timedelta(days=1)).replace(fold=0)
    return updated_at


def parse_text(text: str, message_at: datetime) -> Optional[Status]:
    match = ALERT_STATUS_RE.search(text)
    if not match:
        return None

    hour_str, minute_str, phrase, region_name = match.groups()
    enabled = ALERT_ENABLED_PHRASES.get(phrase)
    if enabled is None:
        return None

    region_id = region.parse_name(region_name)
    if region_id is RegionID.INVALID:
        logger.debug(f"Unknown region in status line: {region_name!r}")
        return None

    hour, minute = int(hour_str), int(minute_str)
    if hour > 23 or minute > 59:
        raise MessageParseError(f"failed to parse time: {hour_str}:{minute_str}")

    return Status(
        region=region_id,
        enabled=enabled,
        updated_at=resolve_timestamp(message_at, hour, minute),
        is_history=False,
    )


def parse_message(message: Message, tz: tzinfo) -> Optional[Status]:
    """
    Status announced by a channel message, or None if it isn't a status line.
    The date comes from the delivery timestamp in the channel timezone.
    """
    if not isinstance(message.content, MessageText):
        return None
    message_at = datetime.fromtimestamp(message.date, tz)
    return parse_text(message.content.text, message_at)
