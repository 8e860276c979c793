"""Markdown pipe-table parsing for the dimensional data panel."""

import re

from .models import TableCell, TableData

_LINK = re.compile(r"\[(.*?)\]\((.*?)\)")


def parse_cell(text: str) -> TableCell:
    """Parse a cell, recognizing a ``[label](url)`` link."""
    text = text.strip()
    match = _LINK.search(text)
    if match:
        return TableCell(text=match.group(1), url=match.group(2))
    return TableCell(text=text)


def _split_row(row: str) -> list[str]:
    return [cell.strip() for cell in row.split("|") if cell.strip()]


def parse_markdown_table(markdown: str) -> TableData | None:
    """Split a markdown table into header and body cells.

    The first pipe row is the header, the second is the separator and the
    rest are body rows. Lines that do not start with a pipe are ignored.

    Returns:
        TableData, or None when fewer than two pipe rows are present
    """
    rows = [line.strip() for line in markdown.strip().split("\n") if line.strip().startswith("|")]
    if len(rows) < 2:
        return None

    headers = _split_row(rows[0])
    body = [[parse_cell(cell) for cell in _split_row(row)] for row in rows[2:]]
    return TableData(headers=headers, rows=body)
