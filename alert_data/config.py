import os
from dotenv import load_dotenv

load_dotenv()

# Channel
ALERT_TIMEZONE = os.getenv("ALERT_TIMEZONE", "Europe/Kyiv")
alert_channel_id_str = os.getenv("ALERT_CHANNEL_ID", "-1001766138888")
ALERT_CHANNEL_ID = int(alert_channel_id_str) if alert_channel_id_str.strip() else -1001766138888

# Scraper
HISTORY_HOURS = float(os.getenv("HISTORY_HOURS", 48))
UPDATE_DISCARD_TIMEOUT = float(os.getenv("UPDATE_DISCARD_TIMEOUT", 0))  # seconds, 0 = never drop
HISTORY_PAGE_SIZE = int(os.getenv("HISTORY_PAGE_SIZE", 100))

# Replay dumps (JSON lines) for the runner
HISTORY_FILE = os.getenv("HISTORY_FILE", "")
UPDATES_FILE = os.getenv("UPDATES_FILE", "")

# Telegram relay (optional)
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
TELEGRAM_CHAT_ID = os.getenv("TELEGRAM_CHAT_ID", "")

# Observability
METRICS_PORT = int(os.getenv("METRICS_PORT", 0))  # 0 = disabled
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_SINK_FILE = os.getenv("LOG_SINK_FILE", "")

if HISTORY_HOURS <= 0:
    raise ValueError("HISTORY_HOURS must be positive")
