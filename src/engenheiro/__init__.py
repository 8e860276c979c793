"""
Engenheiro.AI: technical consultant for machining, welding and industrial standards.

Each module hides a specific design decision:
- report: the response segmentation rules and report rendering
- audio: the PCM wire format, playback timeline and live voice protocol
- llm: the generation provider behind a uniform client
- conversation: the message log and the lifecycle of a chat turn
"""

__version__ = "0.1.0"

from .audio import StreamingAudioClient
from .conversation import ChatSession, ConversationStore, Message
from .llm import GenerationMode, create_generation_client
from .report import ActiveFilters, FilterKey, Report, parse_report

__all__ = [
    "ActiveFilters",
    "ChatSession",
    "ConversationStore",
    "FilterKey",
    "GenerationMode",
    "Message",
    "Report",
    "StreamingAudioClient",
    "create_generation_client",
    "parse_report",
]
