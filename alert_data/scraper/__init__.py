"""
Alert channel scraper: history backfill, live updates and the merged alert data.
"""

from .alert_data import AlertData
from .errors import (
    ScraperError,
    UnknownRegionError,
    ProtocolError,
    HistoryFetchError,
    MessageParseError
)
from .feed import StatusFeed
from .tg_scraper import TgScraper, AIR_ALERT_UA_CHANNEL_ID
from .types import Status

__all__ = [
    'AlertData',
    'Status',
    'StatusFeed',
    'TgScraper',
    'AIR_ALERT_UA_CHANNEL_ID',
    'ScraperError',
    'UnknownRegionError',
    'ProtocolError',
    'HistoryFetchError',
    'MessageParseError'
]
