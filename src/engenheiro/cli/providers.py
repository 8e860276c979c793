"""Client factory functions for the CLI.

Centralizes creation of the generation client and the live transport from
environment variables.
"""

import os

import typer
from rich.console import Console

from ..audio import GeminiLiveTransport, LiveTransport
from ..audio.transport import DEFAULT_LIVE_MODEL, DEFAULT_VOICE
from ..llm import GenerationClient, GenerationError, create_generation_client
from ..llm.providers.gemini import DEFAULT_MODEL, DEFAULT_THINKING_MODEL

_console = Console()


def get_api_key() -> str | None:
    """Read the Gemini API key.

    Environment variables:
        GEMINI_API_KEY: Gemini API key
        API_KEY: Fallback name for the same key
    """
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def require_api_key(console: Console | None = None) -> str:
    """Get the API key, exiting with code 1 if it is missing."""
    con = console or _console
    api_key = get_api_key()
    if not api_key:
        con.print("[red]Error: GEMINI_API_KEY not set in environment[/red]")
        raise typer.Exit(code=1)
    return api_key


def get_generation_client(console: Console | None = None) -> GenerationClient:
    """Create the generation client from environment variables.

    Environment variables:
        GEMINI_API_KEY: Gemini API key (required)
        GEMINI_MODEL: Model for plain and search requests (default: gemini-2.5-flash)
        GEMINI_THINKING_MODEL: Model for thinking requests (default: gemini-2.5-pro)
    """
    con = console or _console
    api_key = require_api_key(con)
    try:
        return create_generation_client(
            "gemini",
            api_key=api_key,
            model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            thinking_model=os.getenv("GEMINI_THINKING_MODEL", DEFAULT_THINKING_MODEL),
        )
    except GenerationError as e:
        con.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(code=1) from e


def get_live_transport(console: Console | None = None) -> LiveTransport:
    """Create the live voice transport from environment variables.

    Environment variables:
        GEMINI_API_KEY: Gemini API key (required)
        GEMINI_LIVE_MODEL: Native audio model
        GEMINI_LIVE_VOICE: Prebuilt voice name (default: Zephyr)
    """
    from ..prompts import get_voice_prompt

    con = console or _console
    return GeminiLiveTransport(
        api_key=require_api_key(con),
        model=os.getenv("GEMINI_LIVE_MODEL", DEFAULT_LIVE_MODEL),
        voice=os.getenv("GEMINI_LIVE_VOICE", DEFAULT_VOICE),
        system_instruction=get_voice_prompt(),
    )

