import asyncio
import logging
from typing import Awaitable, List, Optional

logger = logging.getLogger(__name__)


class ErrGroup:
    """
    Structured group of sibling tasks sharing one stop signal.

    The first sibling to fail, or the stop event being set, cancels every
    other sibling. wait() returns only after all of them have unwound and
    re-raises the first non-cancellation error; with no such error it raises
    asyncio.CancelledError if the group was stopped.
    """

    def __init__(self, stop: asyncio.Event, name: str = "group"):
        self.stop = stop
        self.name = name
        self._tasks: List[asyncio.Task] = []
        self._error: Optional[BaseException] = None
        self._stopped = False

    def spawn(self, coro: Awaitable, name: Optional[str] = None) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        if name:
            task.set_name(f"{self.name}:{name}")
        self._tasks.append(task)
        return task

    def _cancel_all(self):
        for task in self._tasks:
            if not task.done():
                task.cancel()

    def _collect(self, task: asyncio.Task):
        if task.cancelled():
            self._stopped = True
        elif task.exception() is None:
            return
        elif self._error is None:
            self._error = task.exception()
            logger.debug(f"[{self.name}] {task.get_name()} failed: {self._error!r}, cancelling siblings")
        self._cancel_all()

    async def wait(self):
        stopper = asyncio.ensure_future(self.stop.wait())
        pending = set(self._tasks)
        try:
            while pending:
                waiting = pending | {stopper} if not stopper.done() else pending
                done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)
                if stopper in done and not self._stopped:
                    self._stopped = True
                    self._cancel_all()
                for task in done - {stopper}:
                    pending.discard(task)
                    self._collect(task)
        except asyncio.CancelledError:
            # the waiting task itself was cancelled: unwind the siblings first
            self._cancel_all()
            await asyncio.gather(*self._tasks, return_exceptions=True)
            raise
        finally:
            stopper.cancel()

        if self._error is not None:
            raise self._error
        if self._stopped:
            raise asyncio.CancelledError(f"{self.name} stopped")
