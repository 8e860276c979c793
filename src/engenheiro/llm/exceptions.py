"""Exceptions for the llm package."""


class GenerationError(Exception):
    """Raised when a generation request fails.

    ``message`` is readable enough to show to the user as is.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
