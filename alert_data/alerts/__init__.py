"""
Downstream consumers of live alert status changes.
"""

from .telegram_notifier import (
    TelegramNotifier,
    StatusRelay,
    format_status
)

__all__ = [
    'TelegramNotifier',
    'StatusRelay',
    'format_status'
]
