import asyncio
import json
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Union

from alert_data.scraper.types import (
    ForwardInfo,
    HistoryRequest,
    Listener,
    Message,
    MessageText,
    Messages,
    UpdateNewMessage,
)

logger = logging.getLogger(__name__)


def _parse_date(value: Union[int, float, str]) -> int:
    if isinstance(value, (int, float)):
        return int(value)
    return int(datetime.fromisoformat(value).timestamp())


def message_from_record(record: dict) -> Message:
    """
    Build a Message from one dump record:
    {"id": 1, "date": 1724195719 | "2024-08-21T02:15:19+03:00", "text": "...", "forwarded": false}
    """
    text = record.get("text")
    return Message(
        id=int(record["id"]),
        date=_parse_date(record["date"]),
        content=MessageText(text) if text is not None else None,
        forward_info=ForwardInfo() if record.get("forwarded") else None,
        chat_id=int(record.get("chat_id", 0)),
    )


def load_messages(path: str) -> List[Message]:
    messages = []
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                messages.append(message_from_record(json.loads(line)))
            except (KeyError, ValueError) as e:
                raise ValueError(f"{path}:{line_no}: bad message record: {e}") from e
    return messages


class ReplayClient:
    """
    Channel client replaying recorded messages.

    History pages are served newest first, like the real server; live updates
    are queued on the listener up front and the listener then stays idle.
    """

    def __init__(self, history: Iterable[Message] = (), updates: Iterable[Message] = ()):
        self.history = sorted(history, key=lambda m: (m.date, m.id), reverse=True)
        self._pending_updates = list(updates)
        self._listener: Optional[Listener] = None

    @classmethod
    def from_files(cls, history_path: Optional[str] = None, updates_path: Optional[str] = None) -> "ReplayClient":
        history = load_messages(history_path) if history_path else []
        updates = load_messages(updates_path) if updates_path else []
        logger.info(f"Replay loaded: {len(history)} history messages, {len(updates)} updates")
        return cls(history, updates)

    async def get_chat_history(self, request: HistoryRequest) -> Messages:
        start = 0
        if request.from_message_id:
            ids = [m.id for m in self.history]
            if request.from_message_id not in ids:
                return Messages()
            # from_message_id itself is excluded, older messages follow
            start = ids.index(request.from_message_id) + 1
        start += request.offset
        page = self.history[start:start + max(request.limit, 1)]
        await asyncio.sleep(0)
        return Messages(messages=page, total_count=len(self.history))

    def get_listener(self) -> Listener:
        if self._listener is None:
            self._listener = Listener()
            for message in self._pending_updates:
                self._listener.updates.put_nowait(UpdateNewMessage(message))
        return self._listener
