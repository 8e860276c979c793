from dataclasses import dataclass, field
from enum import Enum


class SectionVariant(str, Enum):
    """Card styling for a report section."""

    DEFAULT = "default"
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"
    NORM = "norm"


class FilterKey(str, Enum):
    """Keys the user can toggle to show or hide report sections."""

    ANALISE = "analise"
    NORMAS = "normas"
    RISCOS = "riscos"
    RECOMENDACOES = "recomendacoes"
    CONCLUSAO = "conclusao"


class SpanKind(str, Enum):
    """Tagged span produced while scanning a raw response."""

    PREAMBLE = "preamble"          # Text outside any delimited block
    VISUAL_BLOCK = "visual_block"  # Between the visual panel sentinels
    TEXT_BLOCK = "text_block"      # Between the text analysis sentinels


@dataclass(frozen=True)
class Span:
    """A region of the raw response, in character offsets.

    ``start``/``end`` delimit the content; ``outer_start``/``outer_end``
    also include the sentinel markers around it.
    """

    kind: SpanKind
    start: int
    end: int
    outer_start: int
    outer_end: int


@dataclass(frozen=True)
class Section:
    """One card of a rendered report. Derived on every render, never stored."""

    title: str
    content: str
    variant: SectionVariant = SectionVariant.DEFAULT
    filter_key: FilterKey | None = None

    @property
    def is_filterable(self) -> bool:
        return self.filter_key is not None


@dataclass(frozen=True)
class VisualData:
    """Dimensional data extracted from a visual block."""

    svg: str | None = None
    table: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.svg is None and self.table is None


@dataclass(frozen=True)
class ParsedResponse:
    """Result of splitting a raw response into visual data and analysis text.

    ``visual`` is None when the response carried no complete visual block,
    in which case the caller keeps whatever visual data it already had.
    """

    text: str
    visual: VisualData | None = None
    spans: tuple[Span, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EmphasisRun:
    """A run of inline text, emphasized or plain."""

    text: str
    emphasized: bool = False


@dataclass(frozen=True)
class TableCell:
    """A table cell; ``url`` is set when the cell is a markdown link."""

    text: str
    url: str | None = None


@dataclass(frozen=True)
class TableData:
    """A markdown pipe table split into header and body cells."""

    headers: list[str]
    rows: list[list[TableCell]]


@dataclass(frozen=True)
class Report:
    """A fully parsed response: visible sections plus any visual data."""

    sections: list[Section]
    visual: VisualData | None = None
    text: str = ""
