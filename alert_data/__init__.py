"""Region air-raid alert statuses scraped from a Telegram channel."""

__version__ = "0.1.0"
