"""Rich renderables for reports.

Hides how sections, emphasis runs and dimensional tables are drawn. Used by
both the TUI cards and the plain CLI output.
"""

from dataclasses import dataclass

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..report import (
    Report,
    Section,
    SectionVariant,
    TableData,
    parse_markdown_table,
    tokenize_emphasis,
)


@dataclass(frozen=True)
class VariantStyle:
    """Colors and icon of one section variant."""

    border: str
    title: str
    icon: str


VARIANT_STYLES: dict[SectionVariant, VariantStyle] = {
    SectionVariant.WARNING: VariantStyle(border="#f59e0b", title="bold #b45309", icon="⚠"),
    SectionVariant.SUCCESS: VariantStyle(border="#10b981", title="bold #047857", icon="✔"),
    SectionVariant.NORM: VariantStyle(border="#3b82f6", title="bold #1d4ed8", icon="§"),
    SectionVariant.INFO: VariantStyle(border="#6366f1", title="bold #4338ca", icon="⚙"),
    SectionVariant.DEFAULT: VariantStyle(border="#64748b", title="bold #475569", icon="≡"),
}

EMPHASIS_STYLE = "bold"


def emphasis_text(text: str, style: str = "", strong_style: str = EMPHASIS_STYLE) -> Text:
    """Build a Text with ``**bold**`` runs styled and the markers removed.

    Unmatched asterisks stay as literal characters.
    """
    result = Text(style=style, overflow="fold")
    for run in tokenize_emphasis(text):
        result.append(run.text, style=strong_style if run.emphasized else None)
    return result


def section_panel(section: Section) -> Panel:
    """Render one report section as a card."""
    style = VARIANT_STYLES[section.variant]
    body = emphasis_text(section.content)

    if not section.title:
        return Panel(body, border_style=style.border, padding=(0, 1))

    return Panel(
        body,
        title=Text(f"{style.icon} {section.title.upper()}", style=style.title),
        title_align="left",
        border_style=style.border,
        padding=(0, 1),
    )


def dimensional_table(data: TableData, title: str | None = "Dados Dimensionais") -> Table:
    """Render a parsed dimensional table; link cells show their label and URL."""
    table = Table(title=title, header_style="bold", expand=True, show_lines=False)
    for header in data.headers:
        table.add_column(header, overflow="fold")

    for row in data.rows:
        cells: list[RenderableType] = []
        for cell in row:
            if cell.url:
                cells.append(Text(cell.text, style=f"underline link {cell.url}"))
            else:
                cells.append(emphasis_text(cell.text))
        table.add_row(*cells)
    return table


def report_renderable(report: Report, show_visual: bool = True) -> RenderableType:
    """Render a whole report: the section cards, then the dimensional table."""
    parts: list[RenderableType] = [section_panel(section) for section in report.sections]

    if show_visual and report.visual is not None and report.visual.table:
        data = parse_markdown_table(report.visual.table)
        if data is not None:
            parts.append(dimensional_table(data))
        if report.visual.svg:
            parts.append(Text("Croqui SVG disponível (exporte o relatório para visualizar).", style="dim"))

    return Group(*parts)
