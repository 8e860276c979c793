"""Report segmentation module for engenheiro.

Turns raw model responses into ordered, filterable report sections and
extracts dimensional data from the visual block.
"""

from .emphasis import strip_emphasis, tokenize_emphasis
from .export import render_markdown_report, render_plain_sections, report_reference
from .filters import ActiveFilters
from .headings import (
    CANONICAL_HEADINGS,
    DIMENSIONAL_TABLE_HEADER,
    FILTER_LABELS,
    SOURCES_HEADING,
    TEXT_ANALYSIS_END,
    TEXT_ANALYSIS_START,
    VISUAL_PANEL_END,
    VISUAL_PANEL_START,
)
from .models import (
    EmphasisRun,
    FilterKey,
    ParsedResponse,
    Report,
    Section,
    SectionVariant,
    Span,
    SpanKind,
    TableCell,
    TableData,
    VisualData,
)
from .parser import parse_report, scan_spans, split_blocks, split_sections, visible_sections
from .tables import parse_markdown_table
from .templates import (
    EMPTY_RESPONSE_TEXT,
    REPORT_DISCLAIMER,
    WELCOME_REPORT,
    append_sources,
    build_error_report,
)

__all__ = [
    "ActiveFilters",
    "CANONICAL_HEADINGS",
    "DIMENSIONAL_TABLE_HEADER",
    "EMPTY_RESPONSE_TEXT",
    "EmphasisRun",
    "FILTER_LABELS",
    "FilterKey",
    "ParsedResponse",
    "REPORT_DISCLAIMER",
    "Report",
    "SOURCES_HEADING",
    "Section",
    "SectionVariant",
    "Span",
    "SpanKind",
    "TEXT_ANALYSIS_END",
    "TEXT_ANALYSIS_START",
    "TableCell",
    "TableData",
    "VISUAL_PANEL_END",
    "VISUAL_PANEL_START",
    "VisualData",
    "WELCOME_REPORT",
    "append_sources",
    "build_error_report",
    "parse_markdown_table",
    "parse_report",
    "render_markdown_report",
    "render_plain_sections",
    "report_reference",
    "scan_spans",
    "split_blocks",
    "split_sections",
    "strip_emphasis",
    "tokenize_emphasis",
    "visible_sections",
]
