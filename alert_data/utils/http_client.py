import os
from typing import Dict, Optional

import httpx

from alert_data import __version__

USER_AGENT = f"alert-data/{__version__}"


def get_httpx_client(
    timeout: float = 10.0,
    http2: bool = True,
    proxy: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None
) -> httpx.Client:
    """
    Sync client for outgoing Bot API calls.
    TELEGRAM_PROXY is used when no proxy is given.
    """
    merged_headers = {"User-Agent": USER_AGENT}
    if headers:
        merged_headers.update(headers)
    return httpx.Client(
        timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
        http2=http2,
        proxy=proxy or os.getenv("TELEGRAM_PROXY") or None,
        headers=merged_headers,
    )
