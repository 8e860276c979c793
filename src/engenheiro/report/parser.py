"""Response segmentation.

Hides how a raw model response is cut into visual data, analysis text and
report sections. Parsing runs in two stages:

1. ``split_blocks`` scans the sentinel markers with a small state machine and
   tags every region of the input as preamble, visual block or text block.
2. ``split_sections`` cuts the analysis text at ``## <digit>. `` headings and
   maps each canonical heading to its card variant and filter key.

Missing or malformed markers never raise: the parser degrades to "no visual
data, full text as analysis" and to unlabeled sections.
"""

import re
from collections.abc import Iterable
from enum import Enum

from .headings import (
    SENTINELS,
    SOURCES_HEADING,
    TEXT_ANALYSIS_END,
    TEXT_ANALYSIS_START,
    VISUAL_PANEL_END,
    VISUAL_PANEL_START,
    match_heading,
)
from .models import (
    FilterKey,
    ParsedResponse,
    Report,
    Section,
    Span,
    SpanKind,
    VisualData,
)

_MARKER_PATTERN = re.compile("|".join(re.escape(marker) for marker in SENTINELS))

# Anything shaped like a sentinel, including ones the model misspelled
_RESIDUAL_SENTINEL = re.compile(r"\[\[\[[A-Z_]+\]\]\]")

_HEADING_SPLIT = re.compile(r"(?=## \d\. )")

_SVG_FENCE = re.compile(r"```(?:svg|xml)[ \t]*\n(.*?)```", re.DOTALL | re.IGNORECASE)

# Header row followed by at least one more pipe row
_TABLE_STRICT = re.compile(
    r"^[ \t]*\|[^\n]*\|[ \t]*(?:\n[ \t]*\|[^\n]*\|[ \t]*)+",
    re.MULTILINE,
)
_TABLE_FALLBACK = re.compile(r"\|.*\|", re.DOTALL)

SOURCES_TITLE = SOURCES_HEADING.lstrip("# ").strip()


class _ScanState(Enum):
    OUTSIDE = "outside"
    IN_VISUAL = "in_visual"
    IN_TEXT = "in_text"


def scan_spans(text: str) -> tuple[Span, ...]:
    """Tag every region of ``text`` as preamble, visual block or text block.

    Only the first visual block and the first text block are recognized;
    later sentinels stay inside whatever span contains them. A visual block
    left open when a text analysis start marker appears is abandoned and its
    text becomes preamble. A text block without an end marker runs to the
    end of the input.
    """
    spans: list[Span] = []
    state = _ScanState.OUTSIDE
    cursor = 0
    open_outer = open_inner = 0
    seen_visual = seen_text = False

    def emit_preamble(end: int) -> None:
        if end > cursor:
            spans.append(Span(SpanKind.PREAMBLE, cursor, end, cursor, end))

    for match in _MARKER_PATTERN.finditer(text):
        marker = match.group(0)

        if state is _ScanState.OUTSIDE:
            if marker == VISUAL_PANEL_START and not seen_visual:
                emit_preamble(match.start())
                cursor = match.start()
                open_outer, open_inner = match.start(), match.end()
                state = _ScanState.IN_VISUAL
            elif marker == TEXT_ANALYSIS_START and not seen_text:
                emit_preamble(match.start())
                cursor = match.start()
                open_outer, open_inner = match.start(), match.end()
                state = _ScanState.IN_TEXT

        elif state is _ScanState.IN_VISUAL:
            if marker == VISUAL_PANEL_END:
                spans.append(Span(
                    SpanKind.VISUAL_BLOCK, open_inner, match.start(), open_outer, match.end()
                ))
                seen_visual = True
                cursor = match.end()
                state = _ScanState.OUTSIDE
            elif marker == TEXT_ANALYSIS_START and not seen_text:
                emit_preamble(match.start())
                cursor = match.start()
                open_outer, open_inner = match.start(), match.end()
                state = _ScanState.IN_TEXT

        elif state is _ScanState.IN_TEXT and marker == TEXT_ANALYSIS_END:
            spans.append(Span(
                SpanKind.TEXT_BLOCK, open_inner, match.start(), open_outer, match.end()
            ))
            seen_text = True
            cursor = match.end()
            state = _ScanState.OUTSIDE

    if state is _ScanState.IN_TEXT:
        spans.append(Span(SpanKind.TEXT_BLOCK, open_inner, len(text), open_outer, len(text)))
        cursor = len(text)

    emit_preamble(len(text))
    return tuple(spans)


def extract_svg(block: str) -> str | None:
    """Return the first fenced svg/xml code block holding an ``<svg`` tag."""
    for match in _SVG_FENCE.finditer(block):
        candidate = match.group(1).strip()
        if "<svg" in candidate.lower():
            return candidate
    return None


def extract_table(block: str) -> str | None:
    """Return the markdown pipe table inside ``block``, if any.

    Tries a strict "header row plus one or more pipe rows" match first, then
    falls back to everything between the first and last pipe.
    """
    match = _TABLE_STRICT.search(block)
    if match is None:
        match = _TABLE_FALLBACK.search(block)
    if match is None:
        return None
    table = match.group(0).strip()
    return table or None


def strip_residual_sentinels(text: str) -> str:
    """Remove any leftover sentinel-shaped tokens."""
    return _RESIDUAL_SENTINEL.sub("", text)


def split_blocks(text: str) -> ParsedResponse:
    """Separate the visual block from the text analysis.

    Args:
        text: Raw model response

    Returns:
        ParsedResponse with the cleaned analysis text and, when a complete
        visual block was present, the extracted visual data
    """
    spans = scan_spans(text)
    visual_span = next((s for s in spans if s.kind is SpanKind.VISUAL_BLOCK), None)
    text_span = next((s for s in spans if s.kind is SpanKind.TEXT_BLOCK), None)

    visual = None
    if visual_span is not None:
        block = text[visual_span.start:visual_span.end]
        visual = VisualData(svg=extract_svg(block), table=extract_table(block))

    if text_span is not None:
        cleaned = text[text_span.start:text_span.end]
    elif visual_span is not None:
        cleaned = text[:visual_span.outer_start] + text[visual_span.outer_end:]
    else:
        cleaned = text

    return ParsedResponse(
        text=strip_residual_sentinels(cleaned),
        visual=visual,
        spans=spans,
    )


def _split_sources(text: str) -> tuple[str, str | None]:
    index = text.find(SOURCES_HEADING)
    if index == -1:
        return text, None
    sources = text[index + len(SOURCES_HEADING):].strip()
    return text[:index], sources or None


def split_sections(text: str) -> list[Section]:
    """Cut analysis text into ordered report sections.

    Text is split right before every ``## <digit>. `` heading. Parts that
    start with a canonical heading get its title, variant and filter key;
    anything else (preamble, unknown headings) becomes an unlabeled default
    section. A trailing grounding-sources block becomes its own unlabeled
    section.
    """
    body, sources = _split_sources(text)
    sections: list[Section] = []

    for part in _HEADING_SPLIT.split(body):
        trimmed = part.strip()
        if not trimmed:
            continue

        heading = match_heading(trimmed)
        if heading is None:
            sections.append(Section(title="", content=trimmed))
            continue

        sections.append(Section(
            title=heading.title,
            content=trimmed.replace(heading.marker, "", 1).strip(),
            variant=heading.variant,
            filter_key=heading.filter_key,
        ))

    if sources:
        sections.append(Section(title=SOURCES_TITLE, content=sources))

    return sections


def visible_sections(
    sections: Iterable[Section],
    active: Iterable[FilterKey] | None = None,
) -> list[Section]:
    """Drop sections whose filter key is not active.

    Unlabeled sections are always kept. ``None`` means no filtering.
    """
    if active is None:
        return list(sections)
    keys = set(active)
    return [s for s in sections if s.filter_key is None or s.filter_key in keys]


def parse_report(text: str, active: Iterable[FilterKey] | None = None) -> Report:
    """Run both parsing stages and apply the active filters."""
    parsed = split_blocks(text)
    sections = visible_sections(split_sections(parsed.text), active)
    return Report(sections=sections, visual=parsed.visual, text=parsed.text)
