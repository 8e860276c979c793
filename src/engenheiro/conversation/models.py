"""Conversation log entries.

Attachments are immutable once loaded; messages are mutable only so a bot
placeholder can be resolved in place.
"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from ..llm.models import Attachment


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Message:
    """A message in the conversation log."""

    sender: Sender
    text: str = ""
    id: str = field(default_factory=_new_id)
    timestamp: int = field(default_factory=_now_ms)  # epoch milliseconds
    attachments: list[Attachment] = field(default_factory=list)
    is_thinking: bool = False

    @property
    def is_user(self) -> bool:
        return self.sender is Sender.USER
