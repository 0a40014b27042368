"""
Relays live alert status changes to a Telegram chat.

Setup:
1. Create bot with @BotFather
2. Get bot token
3. Get chat ID (message /start to bot, then check getUpdates)
4. Set TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID in .env
"""

import asyncio
import logging
import os
from typing import Optional

from alert_data.scraper.feed import StatusFeed
from alert_data.scraper.types import Status
from alert_data.utils import metrics
from alert_data.utils.http_client import get_httpx_client

logger = logging.getLogger(__name__)


def format_status(status: Status) -> str:
    """HTML text for one status change."""
    emoji = "🔴" if status.enabled else "🟢"
    state = "Air raid alert" if status.enabled else "All clear"
    name = status.region.display_name or status.region.name
    return (
        f"{emoji} <b>{state}</b>\n"
        f"<b>Region:</b> {name}\n"
        f"<i>Since: {status.updated_at:%Y-%m-%d %H:%M}</i>"
    )


class TelegramNotifier:
    """
    Sends messages via Telegram Bot API.
    """

    API_URL = "https://api.telegram.org/bot{token}/{method}"

    def __init__(self,
                 bot_token: Optional[str] = None,
                 chat_id: Optional[str] = None):
        self.bot_token = bot_token or os.getenv('TELEGRAM_BOT_TOKEN')
        self.chat_id = chat_id or os.getenv('TELEGRAM_CHAT_ID')
        self._enabled = bool(self.bot_token and self.chat_id)

        if not self._enabled:
            logger.warning("Telegram notifier disabled - missing BOT_TOKEN or CHAT_ID")

    @property
    def enabled(self) -> bool:
        return self._enabled

    def send_message(self, text: str, parse_mode: str = "HTML") -> bool:
        """Send a text message to configured chat."""
        if not self._enabled:
            logger.debug(f"[TELEGRAM DISABLED] Would send: {text[:100]}...")
            return False

        url = self.API_URL.format(token=self.bot_token, method='sendMessage')
        payload = {
            'chat_id': self.chat_id,
            'text': text,
            'parse_mode': parse_mode,
            'disable_web_page_preview': True
        }

        try:
            with get_httpx_client(timeout=10) as client:
                resp = client.post(url, json=payload)
                resp.raise_for_status()
        except Exception as e:
            logger.error(f"Telegram send error: {e}")
            return False

        logger.debug("Telegram message sent successfully")
        return True


class StatusRelay:
    """
    Drains a StatusFeed and posts every change through the notifier.
    Returns when the feed is closed.
    """

    def __init__(self, notifier: TelegramNotifier):
        self.notifier = notifier
        self.sent = 0
        self.failed = 0

    async def consume(self, feed: StatusFeed):
        async for status in feed:
            text = format_status(status)
            ok = await asyncio.to_thread(self.notifier.send_message, text)
            if ok:
                self.sent += 1
            elif self.notifier.enabled:
                self.failed += 1
                metrics.RELAY_FAILURES.inc()
        logger.info(f"Status relay finished: {self.sent} sent, {self.failed} failed")
