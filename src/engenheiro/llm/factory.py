from typing import Any

from .base import GenerationClient
from .providers import GeminiGenerationClient


def create_generation_client(provider: str, **config: Any) -> GenerationClient:
    """Create a generation client instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type (only 'gemini' is supported)
        **config: Provider-specific configuration
            For Gemini:
                - api_key: str (required)
                - model: str (default: 'gemini-2.5-flash')
                - thinking_model: str (default: 'gemini-2.5-pro')
                - system_instruction: str | None

    Returns:
        Initialized generation client instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> client = create_generation_client(
        ...     "gemini",
        ...     api_key="...",
        ...     model="gemini-2.5-flash"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower in ("gemini", "google"):
        if "api_key" not in config:
            raise TypeError("Gemini provider requires 'api_key' in config")
        return GeminiGenerationClient(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'gemini'"
    )
