import base64
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class GenerationMode(str, Enum):
    """How a request is generated.

    One value instead of two flags keeps thinking and search mutually
    exclusive.
    """

    PLAIN = "plain"
    THINKING = "thinking"
    SEARCH = "search"


def toggle_mode(current: GenerationMode, requested: GenerationMode) -> GenerationMode:
    """Switch to ``requested``, or back to PLAIN if it is already active."""
    if requested == current:
        return GenerationMode.PLAIN
    return requested


class Attachment(BaseModel):
    """A user-supplied file sent alongside the prompt."""

    model_config = ConfigDict(frozen=True)

    mime_type: str = Field(description="MIME type of the file, e.g. 'application/pdf'")
    data: str = Field(description="Base64-encoded file contents")
    name: str | None = Field(default=None, description="Original file name")

    def to_bytes(self) -> bytes:
        """Decode the base64 payload."""
        return base64.b64decode(self.data)

    @property
    def size(self) -> int:
        """Decoded size in bytes."""
        return len(self.to_bytes())


class GroundingSource(BaseModel):
    """A web source cited by a grounded response."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(description="Page title, or the URI when no title is given")
    uri: str = Field(description="Source URI")


class GenerationResult(BaseModel):
    """Response from a generation client."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Raw response text, with grounding sources appended")
    model: str = Field(description="Model that generated the response")
    mode: GenerationMode = Field(default=GenerationMode.PLAIN, description="Mode used for the request")
    sources: list[GroundingSource] = Field(
        default_factory=list,
        description="Grounding sources (search mode only)"
    )
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )
