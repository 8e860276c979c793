from abc import ABC, abstractmethod
from typing import Any

from .models import Attachment, GenerationMode, GenerationResult


class GenerationClient(ABC):
    """Abstract base class for remote generation clients.

    This module hides the design decision of which generation service
    produces the technical reports. Implementations handle:
    - API client setup and authentication
    - Attachment and prompt encoding
    - Model and tool selection per GenerationMode
    - Translating service failures into GenerationError

    Supports async context manager protocol for proper resource cleanup:
        async with client:
            result = await client.generate(prompt, attachments)
    """

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        attachments: list[Attachment] | None = None,
        mode: GenerationMode = GenerationMode.PLAIN,
    ) -> GenerationResult:
        """Generate a report for a prompt.

        Args:
            prompt: User text
            attachments: Files sent before the prompt, in order
            mode: Plain, thinking or search generation

        Returns:
            GenerationResult with the raw response text

        Raises:
            GenerationError: If the request fails (raised once, never retried)
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "GenerationClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup."""
        await self.close()
