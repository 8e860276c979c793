"""Exceptions for the conversation package.

All of them are raised before any state changes.
"""


class InputValidationError(Exception):
    """Base exception for rejected user input."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EmptySubmissionError(InputValidationError):
    """Raised when a message has neither text nor attachments."""

    def __init__(self, message: str = "Digite uma consulta ou anexe um arquivo.") -> None:
        super().__init__(message)


class UnsupportedAttachmentError(InputValidationError):
    """Raised when a file type is not accepted as an attachment."""

    def __init__(self, message: str = "Formato não suportado.", mime_type: str | None = None) -> None:
        super().__init__(message)
        self.mime_type = mime_type


class SubmissionInProgressError(InputValidationError):
    """Raised when a message is submitted while a reply is still pending."""

    def __init__(self, message: str = "Aguarde a resposta em andamento.") -> None:
        super().__init__(message)
