"""Unit tests for the report module."""
from datetime import datetime

import pytest
from hypothesis import given
from hypothesis import strategies as st

from engenheiro.report import (
    CANONICAL_HEADINGS,
    EMPTY_RESPONSE_TEXT,
    REPORT_DISCLAIMER,
    SOURCES_HEADING,
    TEXT_ANALYSIS_END,
    TEXT_ANALYSIS_START,
    VISUAL_PANEL_END,
    VISUAL_PANEL_START,
    WELCOME_REPORT,
    ActiveFilters,
    EmphasisRun,
    FilterKey,
    SectionVariant,
    SpanKind,
    append_sources,
    build_error_report,
    parse_markdown_table,
    parse_report,
    render_markdown_report,
    render_plain_sections,
    report_reference,
    scan_spans,
    split_blocks,
    split_sections,
    strip_emphasis,
    tokenize_emphasis,
    visible_sections,
)

body_text = st.text(
    alphabet=st.characters(exclude_characters="#[]", exclude_categories=("Cs",)),
    min_size=1,
).filter(lambda s: s.strip())


def five_section_text(bodies: list[str]) -> str:
    return "\n\n".join(
        f"{heading.marker}\n{body}" for heading, body in zip(CANONICAL_HEADINGS, bodies)
    )


class TestSplitSections:
    """Tests for heading-based section splitting."""

    def test_five_canonical_sections(self):
        """Test that the five headings produce five labeled sections in order."""
        sections = split_sections(five_section_text(["a", "b", "c", "d", "e"]))

        assert [s.filter_key for s in sections] == [
            FilterKey.NORMAS,
            FilterKey.ANALISE,
            FilterKey.RISCOS,
            FilterKey.RECOMENDACOES,
            FilterKey.CONCLUSAO,
        ]
        assert [s.variant for s in sections] == [
            SectionVariant.NORM,
            SectionVariant.INFO,
            SectionVariant.WARNING,
            SectionVariant.DEFAULT,
            SectionVariant.SUCCESS,
        ]
        assert [s.content for s in sections] == ["a", "b", "c", "d", "e"]

    @given(st.lists(body_text, min_size=5, max_size=5))
    def test_five_sections_for_any_bodies(self, bodies):
        """Property: five headings with non-empty bodies always give five sections."""
        sections = split_sections(five_section_text(bodies))

        assert len(sections) == 5
        for section, heading, body in zip(sections, CANONICAL_HEADINGS, bodies):
            assert section.title == heading.title
            assert section.variant == heading.variant
            assert section.filter_key == heading.filter_key
            assert section.content == body.strip()

    def test_recommendations_title_is_expanded(self):
        sections = split_sections("## 4. Recomendações\nUse solda TIG.")

        assert sections[0].title == "Recomendações Técnicas"

    def test_preamble_is_unlabeled(self):
        """Test that text before the first heading becomes a default section."""
        sections = split_sections("Resumo inicial.\n## 2. Avaliação Técnica\nOk")

        assert sections[0].title == ""
        assert sections[0].content == "Resumo inicial."
        assert sections[0].filter_key is None
        assert sections[0].variant == SectionVariant.DEFAULT
        assert sections[1].filter_key == FilterKey.ANALISE

    def test_unknown_numbered_heading_is_unlabeled(self):
        sections = split_sections("## 7. Anexos\nTabela extra")

        assert len(sections) == 1
        assert sections[0].filter_key is None
        assert sections[0].content == "## 7. Anexos\nTabela extra"

    def test_no_headings_gives_single_section(self):
        sections = split_sections("Apenas texto livre.")

        assert len(sections) == 1
        assert sections[0].content == "Apenas texto livre."

    def test_empty_text_gives_no_sections(self):
        assert split_sections("   \n  ") == []

    def test_sources_become_trailing_section(self):
        text = "## 5. Conclusão Profissional\nOk\n\n### Fontes Consultadas\n- [ISO](https://iso.org)"

        sections = split_sections(text)

        assert sections[-1].title == "Fontes Consultadas"
        assert sections[-1].filter_key is None
        assert "https://iso.org" in sections[-1].content
        assert sections[0].content == "Ok"


class TestSplitBlocks:
    """Tests for sentinel block extraction."""

    def test_visual_and_text_blocks(self):
        """Test the documented extraction scenario."""
        text = (
            "[[[VISUAL_PANEL_START]]]\n| A | B |\n|---|---|\n| 1 | 2 |\n"
            "[[[VISUAL_PANEL_END]]][[[TEXT_ANALYSIS_START]]]## 1. X\nhello[[[TEXT_ANALYSIS_END]]]"
        )

        parsed = split_blocks(text)

        assert parsed.visual is not None
        assert "| A | B |" in parsed.visual.table
        assert "| 1 | 2 |" in parsed.visual.table
        assert parsed.visual.svg is None
        assert parsed.text == "## 1. X\nhello"

    def test_svg_extraction(self, sample_report_text):
        parsed = split_blocks(sample_report_text)

        assert parsed.visual.svg.startswith("<svg")
        assert parsed.visual.svg.endswith("</svg>")

    def test_svg_fence_without_svg_tag_is_ignored(self):
        text = f"{VISUAL_PANEL_START}\n```xml\n<note/>\n```\n{VISUAL_PANEL_END}"

        parsed = split_blocks(text)

        assert parsed.visual.svg is None

    def test_no_markers_keeps_full_text(self):
        """Test fallback: no visual data and the whole text as analysis."""
        parsed = split_blocks("## 1. Interpretação Normativa\nTexto")

        assert parsed.visual is None
        assert parsed.text == "## 1. Interpretação Normativa\nTexto"

    def test_unterminated_visual_block_is_not_extracted(self):
        text = f"{VISUAL_PANEL_START}\n| A |\n|---|\nResto"

        parsed = split_blocks(text)

        assert parsed.visual is None
        assert VISUAL_PANEL_START not in parsed.text
        assert "Resto" in parsed.text

    def test_visual_without_text_markers_removes_visual_block(self):
        text = f"Antes {VISUAL_PANEL_START}| A |\n| 1 |{VISUAL_PANEL_END} Depois"

        parsed = split_blocks(text)

        assert parsed.visual is not None
        assert parsed.text == "Antes  Depois"

    def test_text_block_without_end_runs_to_end(self):
        text = f"ignorado {TEXT_ANALYSIS_START}## 2. Avaliação Técnica\nOk"

        parsed = split_blocks(text)

        assert parsed.text == "## 2. Avaliação Técnica\nOk"

    def test_residual_sentinels_are_stripped(self):
        text = f"{TEXT_ANALYSIS_START}Texto [[[VISUAL_PANEL_START]]] e [[[VISAUL_END]]]{TEXT_ANALYSIS_END}"

        parsed = split_blocks(text)

        assert "[[[" not in parsed.text

    @given(st.text())
    def test_never_raises(self, text):
        """Property: any input parses without raising."""
        parsed = split_blocks(text)
        assert isinstance(parsed.text, str)


class TestScanSpans:
    """Tests for the span scanner."""

    def test_spans_cover_blocks_in_order(self, sample_report_text):
        kinds = [span.kind for span in scan_spans(sample_report_text)]

        assert SpanKind.VISUAL_BLOCK in kinds
        assert SpanKind.TEXT_BLOCK in kinds
        assert kinds.index(SpanKind.VISUAL_BLOCK) < kinds.index(SpanKind.TEXT_BLOCK)

    def test_plain_text_is_one_preamble(self):
        spans = scan_spans("texto")

        assert len(spans) == 1
        assert spans[0].kind == SpanKind.PREAMBLE
        assert (spans[0].start, spans[0].end) == (0, 5)

    def test_empty_text_has_no_spans(self):
        assert scan_spans("") == ()

    @given(st.lists(st.sampled_from([
        VISUAL_PANEL_START, VISUAL_PANEL_END, TEXT_ANALYSIS_START, TEXT_ANALYSIS_END, "a", "\n",
    ])).map("".join))
    def test_spans_are_ordered_and_disjoint(self, text):
        spans = scan_spans(text)

        for previous, current in zip(spans, spans[1:]):
            assert previous.outer_end <= current.outer_start
        for span in spans:
            assert span.outer_start <= span.start <= span.end <= span.outer_end


class TestFilters:
    """Tests for ActiveFilters and visible_sections."""

    def test_all_keys_active_by_default(self):
        assert set(ActiveFilters()) == set(FilterKey)

    def test_toggle_off_and_on(self):
        filters = ActiveFilters()

        assert filters.toggle(FilterKey.RISCOS) is False
        assert FilterKey.RISCOS not in filters
        assert filters.toggle(FilterKey.RISCOS) is True
        assert FilterKey.RISCOS in filters

    def test_last_key_cannot_be_removed(self):
        """Test that the active set never becomes empty."""
        filters = ActiveFilters([FilterKey.CONCLUSAO])

        assert filters.discard(FilterKey.CONCLUSAO) is False
        assert filters.toggle(FilterKey.CONCLUSAO) is True
        assert list(filters) == [FilterKey.CONCLUSAO]

    @given(st.lists(st.sampled_from(list(FilterKey))))
    def test_never_empty_after_any_toggles(self, keys):
        filters = ActiveFilters()
        for key in keys:
            filters.toggle(key)
        assert len(filters) >= 1

    def test_empty_initial_set_rejected(self):
        with pytest.raises(ValueError):
            ActiveFilters([])

    def test_excluded_section_is_dropped(self):
        """Test that a section with an inactive key is removed and others stay."""
        sections = split_sections(five_section_text(["a", "b", "c", "d", "e"]))
        filters = ActiveFilters()
        filters.toggle(FilterKey.RISCOS)

        visible = visible_sections(sections, filters)

        assert len(visible) == 4
        assert all(s.filter_key != FilterKey.RISCOS for s in visible)

    def test_unlabeled_sections_always_visible(self):
        sections = split_sections("Preâmbulo\n## 3. Riscos e Pontos Críticos\nx")

        visible = visible_sections(sections, [FilterKey.CONCLUSAO])

        assert [s.content for s in visible] == ["Preâmbulo"]

    def test_parse_report_applies_filters(self, sample_report_text):
        report = parse_report(sample_report_text, [FilterKey.NORMAS])

        assert [s.filter_key for s in report.sections] == [FilterKey.NORMAS]
        assert report.visual.table is not None


class TestEmphasis:
    """Tests for inline emphasis tokenization."""

    def test_alternating_runs(self):
        runs = tokenize_emphasis("Ajuste **H7** com eixo **g6**.")

        assert runs == [
            EmphasisRun("Ajuste "),
            EmphasisRun("H7", emphasized=True),
            EmphasisRun(" com eixo "),
            EmphasisRun("g6", emphasized=True),
            EmphasisRun("."),
        ]

    def test_unmatched_marker_is_literal(self):
        runs = tokenize_emphasis("Atenção **sem fechamento")

        assert runs == [EmphasisRun("Atenção **sem fechamento")]

    def test_markers_do_not_cross_lines(self):
        assert strip_emphasis("**a\nb**") == "**a\nb**"

    @given(st.text())
    def test_plain_text_is_preserved(self, text):
        """Property: text without markers comes back unchanged."""
        if "**" in text:
            return
        assert strip_emphasis(text) == text


class TestTables:
    """Tests for markdown table parsing."""

    def test_headers_and_rows(self):
        data = parse_markdown_table("| A | B |\n|---|---|\n| 1 | 2 |\n| 3 | 4 |")

        assert data.headers == ["A", "B"]
        assert [[c.text for c in row] for row in data.rows] == [["1", "2"], ["3", "4"]]

    def test_link_cell(self):
        data = parse_markdown_table("| Norma |\n|---|\n| [ISO 286](https://iso.org/286) |")

        cell = data.rows[0][0]
        assert cell.text == "ISO 286"
        assert cell.url == "https://iso.org/286"

    def test_single_row_is_not_a_table(self):
        assert parse_markdown_table("| A | B |") is None


class TestTemplates:
    """Tests for locally produced report texts."""

    def test_welcome_has_five_sections(self):
        assert len(split_sections(WELCOME_REPORT)) == 5

    def test_error_report_carries_message(self):
        text = build_error_report("Quota exceeded")
        sections = split_sections(text)

        assert len(sections) == 5
        risks = next(s for s in sections if s.filter_key == FilterKey.RISCOS)
        assert "Quota exceeded" in risks.content

    def test_error_report_with_blank_message(self):
        assert "Falha desconhecida." in build_error_report("  ")

    def test_empty_response_text(self):
        assert EMPTY_RESPONSE_TEXT

    def test_append_sources_inside_text_block(self, sample_report_text):
        text = append_sources(sample_report_text, [("ISO", "https://iso.org")])

        assert text.index(SOURCES_HEADING) < text.index(TEXT_ANALYSIS_END)
        report = parse_report(text)
        assert report.sections[-1].title == "Fontes Consultadas"
        assert "[ISO](https://iso.org)" in report.sections[-1].content

    def test_append_sources_without_markers(self):
        text = append_sources("## 5. Conclusão Profissional\nOk", [("A", "https://a.com")])

        assert text.endswith("- [A](https://a.com)\n")

    def test_append_no_sources_is_identity(self):
        assert append_sources("abc", []) == "abc"


class TestExport:
    """Tests for report export."""

    def test_markdown_report_layout(self, sample_report_text):
        report = parse_report(sample_report_text)

        content = render_markdown_report(
            "abcdef1234567890",
            report.sections,
            generated_at=datetime(2024, 3, 5),
            visual=report.visual,
        )

        assert content.startswith("# Relatório Técnico")
        assert "DATA: 05/03/2024" in content
        assert "REF: ABCDEF12" in content
        assert "## Interpretação Normativa" in content
        assert "## Tabela Dimensional" in content
        assert REPORT_DISCLAIMER in content

    def test_report_reference(self):
        assert report_reference("0123456789ab") == "01234567"

    def test_plain_sections_strip_emphasis(self, sample_report_text):
        report = parse_report(sample_report_text, [FilterKey.NORMAS])

        text = render_plain_sections(report.sections)

        assert text.startswith("INTERPRETAÇÃO NORMATIVA\n")
        assert "H7/g6" in text
        assert "**" not in text
