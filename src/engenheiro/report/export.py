"""Printable report export.

Hides the layout of an exported report: header block, sections in display
order and the fixed footer.
"""

from collections.abc import Iterable
from datetime import datetime

from .emphasis import strip_emphasis
from .models import Section, VisualData
from .templates import REPORT_DISCLAIMER

REPORT_TITLE = "Relatório Técnico"
REPORT_FOOTER_SYSTEM = "Engenheiro.AI"


def report_reference(message_id: str) -> str:
    """Short reference printed on the report (first 8 id chars, upper case)."""
    return message_id[:8].upper()


def render_markdown_report(
    message_id: str,
    sections: Iterable[Section],
    generated_at: datetime | None = None,
    visual: VisualData | None = None,
) -> str:
    """Render a report as a standalone markdown document.

    Args:
        message_id: Id of the bot message the report came from
        sections: Sections to include, already filtered
        generated_at: Report date (defaults to now)
        visual: Optional dimensional data appended as an annex

    Returns:
        Markdown text
    """
    date = (generated_at or datetime.now()).strftime("%d/%m/%Y")
    lines = [
        f"# {REPORT_TITLE}",
        "",
        f"DATA: {date}  ",
        f"REF: {report_reference(message_id)}",
        "",
    ]

    for section in sections:
        if section.title:
            lines.append(f"## {section.title}")
            lines.append("")
        lines.append(section.content)
        lines.append("")

    if visual is not None and visual.table:
        lines.extend(["## Tabela Dimensional", "", visual.table, ""])

    lines.extend([
        "---",
        "",
        f"_{REPORT_DISCLAIMER}_",
        "",
        f"{REPORT_FOOTER_SYSTEM}",
        "",
    ])
    return "\n".join(lines)


def render_plain_sections(sections: Iterable[Section]) -> str:
    """Plain-text rendering used for clipboard copies."""
    blocks = []
    for section in sections:
        body = strip_emphasis(section.content)
        blocks.append(f"{section.title.upper()}\n{body}" if section.title else body)
    return "\n\n".join(blocks)
