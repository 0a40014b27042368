import asyncio
from datetime import datetime
from unittest.mock import MagicMock, patch

import httpx
import pytest

from alert_data.alerts import StatusRelay, TelegramNotifier, format_status
from alert_data.region import RegionID
from alert_data.scraper import Status, StatusFeed


@pytest.fixture
def status(kyiv):
    return Status(RegionID.KYIV_CITY, True, datetime(2024, 8, 22, 8, 39, tzinfo=kyiv))


def test_format_status_enabled(status):
    text = format_status(status)
    assert "Air raid alert" in text
    assert "м. Київ" in text
    assert "2024-08-22 08:39" in text


def test_format_status_disabled(kyiv):
    text = format_status(Status(RegionID.ODESA, False, datetime(2024, 8, 21, 2, 15, tzinfo=kyiv)))
    assert text.startswith("🟢")
    assert "All clear" in text
    assert "Одеська область" in text


class TestTelegramNotifier:

    def test_disabled_without_credentials(self, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        monkeypatch.delenv("TELEGRAM_CHAT_ID", raising=False)
        notifier = TelegramNotifier()
        assert notifier.enabled is False
        assert notifier.send_message("hello") is False

    @patch("alert_data.alerts.telegram_notifier.get_httpx_client")
    def test_send_message_posts_to_bot_api(self, mock_client_factory):
        client = MagicMock()
        mock_client_factory.return_value.__enter__.return_value = client

        notifier = TelegramNotifier(bot_token="TOKEN", chat_id="123")
        assert notifier.send_message("<b>hi</b>") is True

        url = client.post.call_args.args[0]
        payload = client.post.call_args.kwargs["json"]
        assert url == "https://api.telegram.org/botTOKEN/sendMessage"
        assert payload["chat_id"] == "123"
        assert payload["parse_mode"] == "HTML"
        client.post.return_value.raise_for_status.assert_called_once()

    @patch("alert_data.alerts.telegram_notifier.get_httpx_client")
    def test_send_error_returns_false(self, mock_client_factory):
        client = MagicMock()
        client.post.side_effect = httpx.ConnectError("network down")
        mock_client_factory.return_value.__enter__.return_value = client

        notifier = TelegramNotifier(bot_token="TOKEN", chat_id="123")
        assert notifier.send_message("hi") is False


class TestStatusRelay:

    @pytest.mark.asyncio
    async def test_relays_every_status_until_closed(self, status, kyiv):
        notifier = MagicMock(spec=TelegramNotifier)
        notifier.enabled = True
        notifier.send_message.side_effect = [True, False]
        relay = StatusRelay(notifier)
        feed = StatusFeed()

        consumer = asyncio.create_task(relay.consume(feed))
        await feed.put(status)
        await feed.put(Status(RegionID.KYIV_CITY, False, datetime(2024, 8, 22, 10, 6, tzinfo=kyiv)))
        feed.close()
        await asyncio.wait_for(consumer, 5)

        assert notifier.send_message.call_count == 2
        assert relay.sent == 1
        assert relay.failed == 1

    @pytest.mark.asyncio
    async def test_disabled_notifier_is_not_a_failure(self, status):
        notifier = MagicMock(spec=TelegramNotifier)
        notifier.enabled = False
        notifier.send_message.return_value = False
        relay = StatusRelay(notifier)
        feed = StatusFeed()

        await feed.put(status)
        feed.close()
        await asyncio.wait_for(relay.consume(feed), 5)

        assert relay.sent == 0
        assert relay.failed == 0
