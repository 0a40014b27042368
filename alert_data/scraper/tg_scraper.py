import asyncio
import logging
import threading
from dataclasses import replace
from datetime import datetime, timedelta, tzinfo
from typing import List, Optional

from alert_data.scraper.alert_data import AlertData
from alert_data.scraper.errors import HistoryFetchError, ProtocolError, ScraperError
from alert_data.scraper.feed import StatusFeed
from alert_data.scraper.parser import parse_message
from alert_data.scraper.types import (
    ChannelClient,
    HistoryRequest,
    Message,
    MessageText,
    Status,
    TYPE_UPDATE_NEW_MESSAGE,
)
from alert_data.scraper.tz import load_timezone
from alert_data.utils import metrics
from alert_data.utils.async_patterns import ErrGroup
from alert_data.utils.structured_log import audit_logger

logger = logging.getLogger(__name__)

AIR_ALERT_UA_CHANNEL_ID = -1001766138888
DEFAULT_HISTORY_WINDOW = timedelta(days=2)


class TgScraper:
    """
    Scrapes region alert statuses from the alert Telegram channel.

    One run backfills history since `history_from` while listening for new
    messages; both feed the same AlertData. Live changes are also pushed to
    the feed returned by updates(), if anyone asked for it.

    Args:
        client: channel client providing chat history and a live listener
        history_from: oldest message date to backfill (default: 2 days ago)
        update_discard_timeout: seconds to wait for a slow updates() consumer
            before dropping a change; 0 blocks instead of dropping
        tz: channel timezone (default: Europe/Kyiv)
    """

    def __init__(self,
                 client: ChannelClient,
                 history_from: Optional[datetime] = None,
                 update_discard_timeout: float = 0.0,
                 tz: Optional[tzinfo] = None,
                 channel_id: int = AIR_ALERT_UA_CHANNEL_ID,
                 history_page_size: int = 100):
        self.client = client
        self.tz = tz or load_timezone()
        if history_from is None:
            history_from = datetime.now(self.tz) - DEFAULT_HISTORY_WINDOW
        elif history_from.tzinfo is None:
            history_from = history_from.replace(tzinfo=self.tz)  # naive means channel time
        self.history_from = history_from
        self.update_discard_timeout = update_discard_timeout
        self.channel_id = channel_id
        self.history_page_size = history_page_size

        self._run_lock = threading.Lock()
        self._started = False
        self._history_done = asyncio.Event()
        self._alert_data = AlertData(self.tz)
        self._updates: Optional[StatusFeed] = None

    @property
    def alert_data(self) -> AlertData:
        """Current alert statuses."""
        return self._alert_data

    def updates(self) -> StatusFeed:
        """
        Feed of live status changes. Ask for it before run() to not miss any;
        it is closed when the run ends.
        """
        if self._updates is None:
            self._updates = StatusFeed(maxsize=1)
        return self._updates

    async def run(self, stop: asyncio.Event):
        """
        Run the scraper until `stop` is set or a fatal error occurs.

        Only the first call does anything; later calls return None at once.
        Stopping surfaces as asyncio.CancelledError, failures as ScraperError.
        """
        if stop is None:
            raise TypeError("scraper: nil stop event")
        if self.client is None:
            raise RuntimeError("scraper: TgScraper needs a channel client")

        with self._run_lock:
            if self._started:
                return None
            self._started = True

        audit_logger.info("SCRAPER_START", history_from=self.history_from.isoformat(),
                          discard_timeout=self.update_discard_timeout)
        try:
            await self._run(stop)
        except asyncio.CancelledError:
            audit_logger.info("SCRAPER_STOP")
            raise
        except ScraperError as e:
            audit_logger.error("SCRAPER_FAILED", error=e)
            raise
        except Exception as e:
            audit_logger.error("SCRAPER_FAILED", error=e)
            raise ScraperError(f"scraper: {e}") from e

    async def wait_for_history(self, stop: Optional[asyncio.Event] = None):
        """Block until the history backfill is over, successful or not."""
        if stop is None:
            await self._history_done.wait()
            return

        done = asyncio.ensure_future(self._history_done.wait())
        stopped = asyncio.ensure_future(stop.wait())
        try:
            await asyncio.wait({done, stopped}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            done.cancel()
            stopped.cancel()
        if not self._history_done.is_set():
            raise asyncio.CancelledError("scraper: stopped before history was fetched")

    async def _run(self, stop: asyncio.Event):
        group = ErrGroup(stop, name="scraper")
        group.spawn(self._history(), name="history")
        group.spawn(self._listen_updates(), name="updates")
        try:
            await group.wait()
        finally:
            # a sibling cancelled before its first step never ran its own cleanup
            self._history_done.set()
            self._close_updates()

    async def _history(self):
        try:
            messages = await self._get_messages_for_period(self.history_from)
            messages.reverse()  # oldest first, so newer statuses win
            applied = 0
            for message in messages:
                status = parse_message(message, self.tz)
                if status is None:
                    continue
                status = replace(status, is_history=True)
                if self._alert_data.set(status):
                    applied += 1
                    metrics.STATUSES_APPLIED.labels(source="history").inc()
            audit_logger.info("HISTORY_DONE", messages=len(messages), applied=applied)
        finally:
            self._history_done.set()

    async def _listen_updates(self):
        listener = self.client.get_listener()
        try:
            while True:
                update = await listener.updates.get()
                if update is None:
                    raise ProtocolError("received nil update")
                if update.kind != TYPE_UPDATE_NEW_MESSAGE:
                    continue
                if update.message.chat_id not in (0, self.channel_id):
                    continue  # another chat
                status = parse_message(update.message, self.tz)
                if status is None:
                    continue
                if not self._alert_data.set(status):
                    logger.debug(f"Stale live status skipped: {status}")
                    continue
                metrics.STATUSES_APPLIED.labels(source="live").inc()
                logger.info(f"{status.region.name}: alert {'enabled' if status.enabled else 'disabled'} "
                            f"at {status.updated_at:%Y-%m-%d %H:%M}")
                await self._send_update(status)
        finally:
            listener.close()

    async def _send_update(self, status: Status):
        if self._updates is None:
            return
        if await self._updates.put(status, timeout=self.update_discard_timeout):
            metrics.UPDATES_FORWARDED.inc()
        else:
            metrics.UPDATES_DISCARDED.inc()
            logger.warning(f"Update discarded after {self.update_discard_timeout}s: {status}")

    async def _get_messages_for_period(self, history_from: datetime) -> List[Message]:
        """Text messages posted since history_from, newest first."""
        messages_for_period: List[Message] = []
        from_message_id = 0
        while True:
            request = HistoryRequest(
                chat_id=self.channel_id,
                from_message_id=from_message_id,
                offset=0,
                limit=self.history_page_size,
                only_local=False,
            )
            try:
                page = await self.client.get_chat_history(request)
            except Exception as e:
                raise HistoryFetchError(f"unable to scrape history: {e}") from e

            if not page.messages:
                return messages_for_period  # no history left

            for message in page.messages:
                message_at = datetime.fromtimestamp(message.date, self.tz)
                if message_at < history_from:
                    return messages_for_period  # too old
                from_message_id = message.id

                if message.forward_info is not None:
                    continue  # skip forwarded posts
                if not isinstance(message.content, MessageText):
                    continue
                messages_for_period.append(message)

    def _close_updates(self):
        if self._updates is not None:
            self._updates.close()
