"""Google Gemini generation client.

Uses the official Google GenAI SDK for async report generation.
Reference: https://github.com/googleapis/python-genai
"""

from typing import Any

from google import genai
from google.genai import errors, types

from ...report import EMPTY_RESPONSE_TEXT, append_sources
from ..base import GenerationClient
from ..exceptions import GenerationError
from ..models import Attachment, GenerationMode, GenerationResult, GroundingSource

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_THINKING_MODEL = "gemini-2.5-pro"
DEFAULT_TEMPERATURE = 0.4
DEFAULT_MAX_OUTPUT_TOKENS = 4000
DEFAULT_THINKING_BUDGET = 8192
FALLBACK_ERROR_MESSAGE = "Erro de comunicação com o sistema especialista."


class GeminiGenerationClient(GenerationClient):
    """Google Gemini generation client.

    Hidden design decisions:
    - Google GenAI client initialization
    - Attachments sent as inline byte parts ahead of the prompt text
    - Model, thinking budget and search tool chosen per GenerationMode
    - Grounding citations appended to the response text
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        thinking_model: str = DEFAULT_THINKING_MODEL,
        system_instruction: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        thinking_budget: int = DEFAULT_THINKING_BUDGET,
        **client_kwargs: Any
    ):
        """Initialize Gemini client.

        Args:
            api_key: Google AI API key
            model: Model for plain and search requests
            thinking_model: Model for thinking requests
            system_instruction: Report instruction (loaded from prompts/system.txt if None)
            temperature: Sampling temperature
            max_output_tokens: Output limit for plain and search requests
            thinking_budget: Token budget for thinking requests
            **client_kwargs: Additional kwargs for Client

        Raises:
            GenerationError: If the API key is empty
        """
        if not api_key:
            raise GenerationError("API Key is missing.")

        if system_instruction is None:
            from ...prompts import get_system_prompt
            system_instruction = get_system_prompt()

        self._model = model
        self._thinking_model = thinking_model
        self._system_instruction = system_instruction
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._thinking_budget = thinking_budget
        self._client = genai.Client(api_key=api_key, **client_kwargs)
        self._debug_callback: Any | None = None

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "LLM", message)

    def _build_contents(self, prompt: str, attachments: list[Attachment]) -> list[types.Content]:
        parts = [
            types.Part.from_bytes(data=attachment.to_bytes(), mime_type=attachment.mime_type)
            for attachment in attachments
        ]
        parts.append(types.Part(text=prompt))
        return [types.Content(role="user", parts=parts)]

    def _build_config(self, mode: GenerationMode) -> tuple[str, types.GenerateContentConfig]:
        """Pick the model and generation config for a mode."""
        config = types.GenerateContentConfig(
            system_instruction=self._system_instruction,
            temperature=self._temperature,
        )

        if mode is GenerationMode.THINKING:
            # Thinking tokens count against the output limit, so none is set
            config.thinking_config = types.ThinkingConfig(thinking_budget=self._thinking_budget)
            return self._thinking_model, config

        config.max_output_tokens = self._max_output_tokens
        if mode is GenerationMode.SEARCH:
            config.tools = [types.Tool(google_search=types.GoogleSearch())]
        return self._model, config

    def _extract_content(self, response) -> str:
        """Extract text content from a Gemini response.

        Args:
            response: Gemini GenerateContentResponse

        Returns:
            Text content or empty string
        """
        if response.candidates and len(response.candidates) > 0:
            candidate = response.candidates[0]
            if candidate.content and candidate.content.parts:
                # Thought summaries are not part of the report
                texts = [
                    part.text for part in candidate.content.parts
                    if part.text and not part.thought
                ]
                if texts:
                    return "".join(texts)
        return ""

    def _extract_sources(self, response) -> list[GroundingSource]:
        """Collect web citations from grounding metadata, deduplicated by URI."""
        if not response.candidates:
            return []
        metadata = response.candidates[0].grounding_metadata
        if metadata is None or not metadata.grounding_chunks:
            return []

        sources: list[GroundingSource] = []
        seen: set[str] = set()
        for chunk in metadata.grounding_chunks:
            web = chunk.web
            if web is None or not web.uri or web.uri in seen:
                continue
            seen.add(web.uri)
            sources.append(GroundingSource(title=web.title or web.uri, uri=web.uri))
        return sources

    async def generate(
        self,
        prompt: str,
        attachments: list[Attachment] | None = None,
        mode: GenerationMode = GenerationMode.PLAIN,
    ) -> GenerationResult:
        """Generate a technical report using Google Gemini.

        Args:
            prompt: User text
            attachments: Files sent before the prompt, in order
            mode: Plain, thinking or search generation

        Returns:
            GenerationResult with the raw response text
        """
        attachments = attachments or []
        model, config = self._build_config(mode)
        contents = self._build_contents(prompt, attachments)
        self._debug(
            "info",
            f"Calling {model} ({mode.value}, {len(attachments)} attachment(s), {len(prompt)} chars)"
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config
            )
        except errors.APIError as e:
            self._debug("error", f"API error {e.code}: {e.message}")
            raise GenerationError(e.message or str(e) or FALLBACK_ERROR_MESSAGE) from e
        except Exception as e:
            self._debug("error", f"Request failed: {e}")
            raise GenerationError(str(e) or FALLBACK_ERROR_MESSAGE) from e

        usage = None
        if response.usage_metadata:
            usage = {
                "prompt_tokens": response.usage_metadata.prompt_token_count or 0,
                "completion_tokens": response.usage_metadata.candidates_token_count or 0,
                "total_tokens": response.usage_metadata.total_token_count or 0
            }

        text = self._extract_content(response) or EMPTY_RESPONSE_TEXT
        sources = self._extract_sources(response) if mode is GenerationMode.SEARCH else []
        text = append_sources(text, [(s.title, s.uri) for s in sources])
        self._debug("info", f"Response received ({len(text)} chars, {len(sources)} source(s))")

        return GenerationResult(
            text=text,
            model=model,
            mode=mode,
            sources=sources,
            usage=usage
        )

    async def close(self) -> None:
        """Close the Gemini client.

        Note: The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
        pass
