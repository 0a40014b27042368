import asyncio
from typing import Optional

from alert_data.scraper.types import Status


class StatusFeed:
    """
    Bounded outbound queue of live status changes.

    Single producer (the scraper), any number of consumers. Once closed,
    consumers drain what is left and then get None.
    """

    def __init__(self, maxsize: int = 1):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    async def put(self, status: Status, timeout: float = 0) -> bool:
        """
        Enqueue a status. timeout <= 0 waits for as long as it takes;
        otherwise the status is dropped after `timeout` seconds.
        Returns True if the status was enqueued.
        """
        if self.closed:
            raise RuntimeError("put on closed StatusFeed")
        if timeout <= 0:
            await self._queue.put(status)
            return True
        try:
            await asyncio.wait_for(self._queue.put(status), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def get(self) -> Optional[Status]:
        if not self._queue.empty():
            return self._queue.get_nowait()
        if self.closed:
            return None

        getter = asyncio.ensure_future(self._queue.get())
        closer = asyncio.ensure_future(self._closed.wait())
        try:
            await asyncio.wait({getter, closer}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            closer.cancel()
            if not getter.done():
                getter.cancel()

        if getter.done() and not getter.cancelled():
            return getter.result()
        # closed while waiting; an item may still have slipped in first
        if not self._queue.empty():
            return self._queue.get_nowait()
        return None

    def close(self):
        """Wake every waiting consumer. Safe to call more than once."""
        self._closed.set()

    def __aiter__(self):
        return self

    async def __anext__(self) -> Status:
        status = await self.get()
        if status is None:
            raise StopAsyncIteration
        return status
