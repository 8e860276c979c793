"""Terminal UI module for engenheiro.

Provides a Textual-based TUI for technical consultations.

Module structure:
- config.py: Labels, formats and log levels
- formatting.py: Rich renderables for report cards and tables
- widgets.py: Custom widgets (report cards, filter bar, data table, log)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette
- screens.py: Modal dialogs (alerts, confirmation, file selection)
- app.py: Application orchestration (user interaction flow)
"""

from .app import EngenheiroApp, run_textual_tui
from .config import LogLevel
from .formatting import report_renderable, section_panel
from .widgets import (
    AttachmentBar,
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    FilterBar,
    MessageView,
    StatusBar,
    VisualPanel,
    VoicePanel,
)

__all__ = [
    "AttachmentBar",
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "EngenheiroApp",
    "FilterBar",
    "LogLevel",
    "MessageView",
    "StatusBar",
    "VisualPanel",
    "VoicePanel",
    "report_renderable",
    "run_textual_tui",
    "section_panel",
]
