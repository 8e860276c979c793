"""Turning user files into attachments."""

import base64
import mimetypes
from pathlib import Path

from ..llm.models import Attachment
from .exceptions import InputValidationError, UnsupportedAttachmentError

ACCEPTED_MIME_TYPES = ("image/*", "application/pdf", "text/plain")


def is_supported_mime_type(mime_type: str | None) -> bool:
    """Check a MIME type against the accepted attachment types."""
    if not mime_type:
        return False
    return mime_type.startswith("image/") or mime_type in ("application/pdf", "text/plain")


def attachment_from_bytes(data: bytes, mime_type: str, name: str | None = None) -> Attachment:
    """Build an attachment from raw file contents.

    Raises:
        UnsupportedAttachmentError: If the MIME type is not accepted
    """
    if not is_supported_mime_type(mime_type):
        raise UnsupportedAttachmentError(mime_type=mime_type)
    return Attachment(
        mime_type=mime_type,
        data=base64.b64encode(data).decode("ascii"),
        name=name,
    )


def load_attachment(path: str | Path) -> Attachment:
    """Read a file from disk as an attachment.

    The MIME type is guessed from the file name.

    Raises:
        UnsupportedAttachmentError: If the file type is not accepted
        InputValidationError: If the file cannot be read
    """
    file_path = Path(path).expanduser()
    mime_type, _ = mimetypes.guess_type(file_path.name)
    if not is_supported_mime_type(mime_type):
        raise UnsupportedAttachmentError(mime_type=mime_type)

    try:
        data = file_path.read_bytes()
    except OSError as e:
        raise InputValidationError(f"Não foi possível ler {file_path.name}: {e.strerror or e}") from e

    return attachment_from_bytes(data, mime_type, name=file_path.name)
