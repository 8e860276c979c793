"""Instruction texts sent to the remote models.

The report instruction is the other half of the sentinel and heading
contract in ``engenheiro.report.headings``. Both instructions can be
overridden by placing ``prompts/<name>.txt`` in the working directory.
"""

from functools import lru_cache
from pathlib import Path

_PACKAGE_DIR = Path(__file__).parent

REPORT_PROMPT = "system"
VOICE_PROMPT = "voice"


def _candidates(name: str) -> list[Path]:
    filename = f"{name}.txt"
    return [Path.cwd() / "prompts" / filename, _PACKAGE_DIR / filename]


@lru_cache(maxsize=8)
def load_prompt(name: str) -> str:
    """Load an instruction by name.

    The working-directory copy wins over the packaged one.

    Raises:
        FileNotFoundError: If no copy exists
    """
    candidates = _candidates(name)
    for path in candidates:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()

    searched = "\n".join(f"  - {path}" for path in candidates)
    raise FileNotFoundError(f"Prompt '{name}' not found. Searched:\n{searched}")


def get_system_prompt() -> str:
    """Instruction for written technical reports."""
    return load_prompt(REPORT_PROMPT)


def get_voice_prompt() -> str:
    """Instruction for the real-time voice session."""
    return load_prompt(VOICE_PROMPT)


def clear_cache() -> None:
    """Forget loaded instructions (after editing an override file)."""
    load_prompt.cache_clear()


__all__ = [
    "REPORT_PROMPT",
    "VOICE_PROMPT",
    "clear_cache",
    "get_system_prompt",
    "get_voice_prompt",
    "load_prompt",
]
