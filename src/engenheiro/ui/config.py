"""UI configuration constants.

Centralizes labels, file names and other fixed values for the UI module.
"""

from ..llm import GenerationMode


class LogLevel:
    """Log level constants with numeric values for comparison.

    DEBUG < INFO < WARNING < ERROR; a lower threshold shows more messages.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARN",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the display name for a log level."""
        return cls._names.get(level, "?")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert a level name to its value. Unknown names map to DEBUG."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Log panel
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500

# Component colors in the log panel
COMPONENT_COLORS = {
    "TUI": "cyan",
    "Chat": "green",
    "LLM": "magenta",
    "Voice": "bright_blue",
}

# Chat display
MESSAGE_TIME_FORMAT = "%H:%M"
THINKING_TEXT = "Analisando documentação e normas técnicas..."
USER_LABEL = "Você"
BOT_LABEL = "Engenheiro.AI"

MODE_LABELS = {
    GenerationMode.PLAIN: "Padrão",
    GenerationMode.THINKING: "Raciocínio profundo",
    GenerationMode.SEARCH: "Pesquisa web",
}

# Report export
EXPORT_FILENAME_TEMPLATE = "relatorio-{reference}.md"
