"""Inline ``**bold**`` tokenization for section bodies."""

import re

from .models import EmphasisRun

# Non-greedy and single-line: markers never pair across line breaks
_EMPHASIS_SPLIT = re.compile(r"(\*\*.*?\*\*)")


def tokenize_emphasis(text: str) -> list[EmphasisRun]:
    """Split text into alternating plain and emphasized runs.

    Unmatched or malformed markers are left in the plain runs verbatim.
    """
    runs: list[EmphasisRun] = []
    for part in _EMPHASIS_SPLIT.split(text):
        if not part:
            continue
        if len(part) >= 4 and part.startswith("**") and part.endswith("**"):
            inner = part[2:-2]
            if inner:
                runs.append(EmphasisRun(inner, emphasized=True))
            continue
        runs.append(EmphasisRun(part))
    return runs


def strip_emphasis(text: str) -> str:
    """Return the text with matched emphasis markers removed."""
    return "".join(run.text for run in tokenize_emphasis(text))
