from .base import GenerationClient
from .exceptions import GenerationError
from .factory import create_generation_client
from .models import Attachment, GenerationMode, GenerationResult, GroundingSource, toggle_mode
from .providers import GeminiGenerationClient

__all__ = [
    "Attachment",
    "GeminiGenerationClient",
    "GenerationClient",
    "GenerationError",
    "GenerationMode",
    "GenerationResult",
    "GroundingSource",
    "create_generation_client",
    "toggle_mode",
]
