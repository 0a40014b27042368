"""
Data types shared by the scraper and the channel client it consumes.

The message/update shapes mirror the subset of the Telegram client API the
scraper relies on: a paged chat history query and a listener with a queue of
typed updates.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Protocol

from alert_data.region import RegionID

TYPE_MESSAGE_TEXT = "messageText"
TYPE_MESSAGE_PHOTO = "messagePhoto"
TYPE_UPDATE_NEW_MESSAGE = "updateNewMessage"
TYPE_UPDATE_MESSAGE_EDITED = "updateMessageEdited"


@dataclass(frozen=True)
class Status:
    """Alert status of one region as of updated_at."""
    region: RegionID
    enabled: bool
    updated_at: datetime
    is_history: bool = False  # if True, updated_at may be a placeholder


class MessageContent:
    content_type = ""


@dataclass
class MessageText(MessageContent):
    text: str
    content_type = TYPE_MESSAGE_TEXT


@dataclass
class MessagePhoto(MessageContent):
    caption: str = ""
    content_type = TYPE_MESSAGE_PHOTO


@dataclass
class ForwardInfo:
    origin: str = ""
    date: int = 0


@dataclass
class Message:
    id: int
    date: int  # unix seconds, as reported by the server
    content: Optional[MessageContent] = None
    forward_info: Optional[ForwardInfo] = None
    chat_id: int = 0


@dataclass
class Messages:
    messages: List[Message] = field(default_factory=list)
    total_count: int = 0


@dataclass
class HistoryRequest:
    chat_id: int
    from_message_id: int = 0  # 0 means "start from the most recent message"
    offset: int = 0
    limit: int = 100
    only_local: bool = False


class Update:
    kind = ""


@dataclass
class UpdateNewMessage(Update):
    message: Message
    kind = TYPE_UPDATE_NEW_MESSAGE


@dataclass
class UpdateMessageEdited(Update):
    chat_id: int
    message_id: int
    kind = TYPE_UPDATE_MESSAGE_EDITED


class Listener:
    """Live subscription: updates arrive on an asyncio queue until closed."""

    def __init__(self, updates: Optional[asyncio.Queue] = None):
        self.updates: asyncio.Queue = updates if updates is not None else asyncio.Queue()
        self.closed = False

    def close(self):
        self.closed = True


class ChannelClient(Protocol):
    async def get_chat_history(self, request: HistoryRequest) -> Messages:
        ...

    def get_listener(self) -> Listener:
        ...
