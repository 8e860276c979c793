"""One chat turn at a time.

ChatSession ties the store, the generation client and the parser together:
validate input, record the user message, show a thinking placeholder for the
whole request and resolve it with the reply or a synthetic error report.
"""

from typing import Any

from ..llm.base import GenerationClient
from ..llm.exceptions import GenerationError
from ..llm.models import GenerationMode, toggle_mode
from ..report import ActiveFilters, VisualData, split_blocks
from .exceptions import EmptySubmissionError, SubmissionInProgressError
from .models import Message
from .store import ConversationStore


class ChatSession:
    """Conversation state shared by the chat surfaces.

    Holds the parts of UI state that outlive a single render: the active
    filters, the generation mode and the last visual data (sticky across
    turns until a response carries a new visual block).
    """

    def __init__(
        self,
        client: GenerationClient,
        store: ConversationStore | None = None,
        mode: GenerationMode = GenerationMode.PLAIN,
    ) -> None:
        self._client = client
        self._store = store if store is not None else ConversationStore()
        self._mode = mode
        self._filters = ActiveFilters()
        self._visual: VisualData | None = None
        self._loading = False
        self._debug_callback: Any | None = None

    @property
    def store(self) -> ConversationStore:
        return self._store

    @property
    def filters(self) -> ActiveFilters:
        return self._filters

    @property
    def mode(self) -> GenerationMode:
        return self._mode

    @property
    def visual(self) -> VisualData | None:
        """Most recent visual data, or None before any visual block arrived."""
        return self._visual

    @property
    def is_loading(self) -> bool:
        """Whether a reply is pending."""
        return self._loading

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Chat", message)

    def toggle_mode(self, requested: GenerationMode) -> GenerationMode:
        """Enable a mode, or fall back to plain if it was already on."""
        self._mode = toggle_mode(self._mode, requested)
        self._debug("info", f"Mode: {self._mode.value}")
        return self._mode

    def begin(self, text: str) -> tuple[Message, Message]:
        """Record a submission and its thinking placeholder.

        Pending attachments move into the user message.

        Returns:
            (user message, bot placeholder)

        Raises:
            SubmissionInProgressError: If a reply is still pending
            EmptySubmissionError: If there is neither text nor an attachment
        """
        if self._loading:
            raise SubmissionInProgressError()
        if not text.strip() and not self._store.pending_attachments:
            raise EmptySubmissionError()

        user_message = self._store.add_user_message(text, self._store.take_attachments())
        placeholder = self._store.add_thinking_placeholder()
        self._loading = True
        return user_message, placeholder

    async def complete(self, user_message: Message, placeholder: Message) -> Message:
        """Request the reply for a submission and resolve its placeholder.

        Never raises for remote failures: the placeholder then holds the
        error report instead.
        """
        try:
            result = await self._client.generate(
                user_message.text,
                user_message.attachments,
                self._mode,
            )
        except GenerationError as e:
            self._debug("error", f"Generation failed: {e.message}")
            return self._store.fail(placeholder.id, e.message)
        except Exception as e:
            # Clients outside the llm package may raise anything; cancellation still propagates
            message = str(e) or type(e).__name__
            self._debug("error", f"Unexpected generation failure: {message}")
            return self._store.fail(placeholder.id, message)
        finally:
            self._loading = False

        parsed = split_blocks(result.text)
        if parsed.visual is not None:
            self._visual = parsed.visual
            self._debug("debug", "Visual data updated")

        return self._store.resolve(placeholder.id, result.text)

    async def send(self, text: str) -> Message:
        """Submit a message and wait for the resolved reply.

        Raises:
            SubmissionInProgressError: If a reply is still pending
            EmptySubmissionError: If there is neither text nor an attachment
        """
        user_message, placeholder = self.begin(text)
        return await self.complete(user_message, placeholder)

    def clear(self) -> None:
        """Start over with the welcome message and no visual data."""
        self._store.clear()
        self._visual = None
