import asyncio
import argparse
import signal
import sys
from datetime import datetime, timedelta
from dotenv import load_dotenv

# Load Env
load_dotenv()

import logging

from alert_data import config
from alert_data.alerts import StatusRelay, TelegramNotifier
from alert_data.scraper import ScraperError, TgScraper
from alert_data.scraper.replay_client import ReplayClient
from alert_data.scraper.tz import load_timezone
from alert_data.utils.metrics import MetricsServer
from alert_data.utils.structured_log import audit_logger

logger = logging.getLogger("alert_data")


class AlertDataService:
    """Wires a channel client, the scraper and the Telegram relay together."""

    def __init__(self, client, history_hours: float, discard_timeout: float, timezone_name: str):
        self.tz = load_timezone(timezone_name)
        self.scraper = TgScraper(
            client,
            history_from=datetime.now(self.tz) - timedelta(hours=history_hours),
            update_discard_timeout=discard_timeout,
            tz=self.tz,
            channel_id=config.ALERT_CHANNEL_ID,
            history_page_size=config.HISTORY_PAGE_SIZE,
        )
        self.relay = StatusRelay(TelegramNotifier(config.TELEGRAM_BOT_TOKEN, config.TELEGRAM_CHAT_ID))
        self.stop = asyncio.Event()

        self.metrics = None
        if config.METRICS_PORT:
            self.metrics = MetricsServer(port=config.METRICS_PORT)

    def _install_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.stop.set)
            except NotImplementedError:
                pass  # Windows: KeyboardInterrupt still ends asyncio.run()

    def _log_snapshot(self):
        active = self.scraper.alert_data.active_regions()
        logger.info(f"History loaded: {len(active)} regions under alert")
        for region_id in active:
            status = self.scraper.alert_data.get(region_id)
            logger.info(f"  {region_id.display_name}: since {status.updated_at:%Y-%m-%d %H:%M}")

    async def run(self) -> int:
        self._install_signal_handlers()
        if self.metrics:
            self.metrics.start()

        updates = self.scraper.updates()
        run_task = asyncio.create_task(self.scraper.run(self.stop))
        relay_task = asyncio.create_task(self.relay.consume(updates))

        try:
            await self.scraper.wait_for_history(self.stop)
            self._log_snapshot()
        except asyncio.CancelledError:
            logger.info("Stopped before history was loaded")

        exit_code = 0
        try:
            await run_task
        except asyncio.CancelledError:
            logger.info("Scraper stopped")
        except ScraperError as e:
            logger.error(f"Scraper failed: {e}")
            exit_code = 1

        await relay_task
        audit_logger.info("SERVICE_EXIT", exit_code=exit_code)
        return exit_code


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Scrape region alert statuses from the alert channel")
    parser.add_argument("--history-file", default=config.HISTORY_FILE, help="JSON lines dump of channel history")
    parser.add_argument("--updates-file", default=config.UPDATES_FILE, help="JSON lines dump replayed as live updates")
    parser.add_argument("--history-hours", type=float, default=config.HISTORY_HOURS)
    parser.add_argument("--discard-timeout", type=float, default=config.UPDATE_DISCARD_TIMEOUT)
    parser.add_argument("--timezone", default=config.ALERT_TIMEZONE)
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    client = ReplayClient.from_files(args.history_file or None, args.updates_file or None)
    service = AlertDataService(client, args.history_hours, args.discard_timeout, args.timezone)
    try:
        return asyncio.run(service.run())
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
