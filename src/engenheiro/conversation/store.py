"""In-memory conversation log.

Hides how messages and pending attachments are kept. The log lives for the
process only; messages are never removed individually.
"""

from collections.abc import Iterator

from ..llm.models import Attachment
from ..report import WELCOME_REPORT, build_error_report
from .models import Message, Sender


class ConversationStore:
    """Ordered message log plus the attachments waiting for the next send."""

    def __init__(self, welcome_text: str | None = WELCOME_REPORT) -> None:
        """Initialize the store.

        Args:
            welcome_text: Text of the initial bot message (None for an empty log)
        """
        self._welcome_text = welcome_text
        self._messages: list[Message] = []
        self._index: dict[str, Message] = {}
        self._pending: list[Attachment] = []
        self._seed()

    def _seed(self) -> None:
        if self._welcome_text is not None:
            self._append(Message(sender=Sender.BOT, text=self._welcome_text))

    def _append(self, message: Message) -> Message:
        self._messages.append(message)
        self._index[message.id] = message
        return message

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def get(self, message_id: str) -> Message:
        """Look up a message.

        Raises:
            KeyError: If no message has this id
        """
        return self._index[message_id]

    def last_bot_message(self) -> Message | None:
        """Most recent resolved bot message."""
        for message in reversed(self._messages):
            if message.sender is Sender.BOT and not message.is_thinking:
                return message
        return None

    # Pending attachments

    @property
    def pending_attachments(self) -> tuple[Attachment, ...]:
        return tuple(self._pending)

    def add_attachment(self, attachment: Attachment) -> None:
        self._pending.append(attachment)

    def remove_attachment(self, index: int) -> Attachment:
        """Drop a pending attachment by position.

        Raises:
            IndexError: If the index is out of range
        """
        return self._pending.pop(index)

    def take_attachments(self) -> list[Attachment]:
        """Empty the pending buffer and return what it held."""
        taken, self._pending = self._pending, []
        return taken

    def clear_attachments(self) -> None:
        self._pending.clear()

    # Message lifecycle

    def add_user_message(self, text: str, attachments: list[Attachment] | None = None) -> Message:
        return self._append(Message(
            sender=Sender.USER,
            text=text,
            attachments=list(attachments or []),
        ))

    def add_thinking_placeholder(self) -> Message:
        """Append an unresolved bot message."""
        return self._append(Message(sender=Sender.BOT, is_thinking=True))

    def resolve(self, message_id: str, text: str) -> Message:
        """Finish a placeholder with its reply text.

        Raises:
            KeyError: If no message has this id
        """
        message = self._index[message_id]
        message.text = text
        message.is_thinking = False
        return message

    def fail(self, message_id: str, error_message: str) -> Message:
        """Finish a placeholder with the synthetic error report."""
        return self.resolve(message_id, build_error_report(error_message))

    def clear(self) -> None:
        """Reset to the initial state (welcome message only)."""
        self._messages.clear()
        self._index.clear()
        self._pending.clear()
        self._seed()
