"""Conversation state module for engenheiro.

Hides the message log, the pending attachment buffer and the lifecycle of a
chat turn.
"""

from ..llm.models import Attachment, GenerationMode, toggle_mode
from .attachments import (
    ACCEPTED_MIME_TYPES,
    attachment_from_bytes,
    is_supported_mime_type,
    load_attachment,
)
from .exceptions import (
    EmptySubmissionError,
    InputValidationError,
    SubmissionInProgressError,
    UnsupportedAttachmentError,
)
from .models import Message, Sender
from .session import ChatSession
from .store import ConversationStore

__all__ = [
    "ACCEPTED_MIME_TYPES",
    "Attachment",
    "ChatSession",
    "ConversationStore",
    "EmptySubmissionError",
    "GenerationMode",
    "InputValidationError",
    "Message",
    "Sender",
    "SubmissionInProgressError",
    "UnsupportedAttachmentError",
    "attachment_from_bytes",
    "is_supported_mime_type",
    "load_attachment",
    "toggle_mode",
]
