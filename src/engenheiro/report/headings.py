"""Literal markers the remote model is instructed to emit.

These strings are a wire contract with the system prompt: any deviation in
the model output falls back to unlabeled rendering instead of failing.
"""

from dataclasses import dataclass

from .models import FilterKey, SectionVariant

# Sentinels bracketing the visual (dimensional data) and text analysis blocks
VISUAL_PANEL_START = "[[[VISUAL_PANEL_START]]]"
VISUAL_PANEL_END = "[[[VISUAL_PANEL_END]]]"
TEXT_ANALYSIS_START = "[[[TEXT_ANALYSIS_START]]]"
TEXT_ANALYSIS_END = "[[[TEXT_ANALYSIS_END]]]"

SENTINELS = (
    VISUAL_PANEL_START,
    VISUAL_PANEL_END,
    TEXT_ANALYSIS_START,
    TEXT_ANALYSIS_END,
)

# Header of the dimensional data table the model must use in the visual block
DIMENSIONAL_TABLE_HEADER = "| Característica | Valor Nominal | Tolerância | Norma de Referência |"

# Trailer appended by the generation client when web grounding returns sources
SOURCES_HEADING = "### Fontes Consultadas"


@dataclass(frozen=True)
class CanonicalHeading:
    """A section heading the parser recognizes."""

    marker: str
    title: str
    variant: SectionVariant
    filter_key: FilterKey


CANONICAL_HEADINGS: tuple[CanonicalHeading, ...] = (
    CanonicalHeading(
        marker="## 1. Interpretação Normativa",
        title="Interpretação Normativa",
        variant=SectionVariant.NORM,
        filter_key=FilterKey.NORMAS,
    ),
    CanonicalHeading(
        marker="## 2. Avaliação Técnica",
        title="Avaliação Técnica",
        variant=SectionVariant.INFO,
        filter_key=FilterKey.ANALISE,
    ),
    CanonicalHeading(
        marker="## 3. Riscos e Pontos Críticos",
        title="Riscos e Pontos Críticos",
        variant=SectionVariant.WARNING,
        filter_key=FilterKey.RISCOS,
    ),
    CanonicalHeading(
        marker="## 4. Recomendações",
        title="Recomendações Técnicas",
        variant=SectionVariant.DEFAULT,
        filter_key=FilterKey.RECOMENDACOES,
    ),
    CanonicalHeading(
        marker="## 5. Conclusão Profissional",
        title="Conclusão Profissional",
        variant=SectionVariant.SUCCESS,
        filter_key=FilterKey.CONCLUSAO,
    ),
)

# Display labels for the filter bar, in bar order
FILTER_LABELS: dict[FilterKey, str] = {
    FilterKey.ANALISE: "Análise",
    FilterKey.NORMAS: "Normas",
    FilterKey.RISCOS: "Riscos",
    FilterKey.RECOMENDACOES: "Recomendações",
    FilterKey.CONCLUSAO: "Conclusão",
}


def match_heading(section_text: str) -> CanonicalHeading | None:
    """Return the canonical heading a trimmed section starts with, if any."""
    for heading in CANONICAL_HEADINGS:
        if section_text.startswith(heading.marker):
            return heading
    return None


def heading_for(filter_key: FilterKey) -> CanonicalHeading:
    """Return the canonical heading carrying a filter key."""
    for heading in CANONICAL_HEADINGS:
        if heading.filter_key == filter_key:
            return heading
    raise KeyError(filter_key)
