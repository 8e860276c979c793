"""Fixed report texts produced locally instead of by the remote model."""

from .headings import SOURCES_HEADING, TEXT_ANALYSIS_END, TEXT_ANALYSIS_START, heading_for
from .models import FilterKey

EMPTY_RESPONSE_TEXT = (
    "Não foi possível gerar uma resposta técnica. Verifique os dados de entrada."
)

REPORT_DISCLAIMER = (
    "Documento gerado automaticamente para fins de consulta técnica. "
    "Valide com as normas oficiais vigentes."
)


def _report(bodies: dict[FilterKey, str]) -> str:
    blocks = []
    for key in (
        FilterKey.NORMAS,
        FilterKey.ANALISE,
        FilterKey.RISCOS,
        FilterKey.RECOMENDACOES,
        FilterKey.CONCLUSAO,
    ):
        blocks.append(f"{heading_for(key).marker}\n{bodies.get(key, '')}".rstrip())
    return "\n\n".join(blocks)


WELCOME_REPORT = _report({
    FilterKey.NORMAS: "Base de dados carregada: ABNT, ISO, ASME, AWS, DIN, ASTM.",
    FilterKey.ANALISE: "Sistema online. Especialista Industrial pronto para operação.",
    FilterKey.RISCOS: "Validação de campo necessária. ART obrigatória para execução.",
    FilterKey.RECOMENDACOES: "Faça o upload de desenhos, WPS ou especifique o problema técnico.",
    FilterKey.CONCLUSAO: "Aguardando input.",
})


def build_error_report(message: str) -> str:
    """Build the five-section report shown when a generation request fails.

    Args:
        message: Human-readable failure description, placed in the risk section

    Returns:
        Report text following the canonical heading layout
    """
    detail = message.strip() or "Falha desconhecida."
    return _report({
        FilterKey.NORMAS: "Consulta não concluída.",
        FilterKey.ANALISE: "Não foi possível obter a análise do sistema especialista.",
        FilterKey.RISCOS: f"Erro de comunicação: {detail}",
        FilterKey.RECOMENDACOES: "Reenvie a consulta. Os anexos permanecem no histórico.",
        FilterKey.CONCLUSAO: "Verifique a conexão.",
    })


def append_sources(text: str, sources: list[tuple[str, str]]) -> str:
    """Add a grounding-sources trailer to a response.

    The trailer goes inside the text analysis block when there is one, so
    the segmentation parser keeps it.

    Args:
        text: Raw model response
        sources: (title, uri) pairs, in citation order

    Returns:
        Response text with a ``### Fontes Consultadas`` list
    """
    if not sources:
        return text

    lines = "\n".join(f"- [{title}]({uri})" for title, uri in sources)
    trailer = f"\n\n{SOURCES_HEADING}\n{lines}\n"

    start = text.find(TEXT_ANALYSIS_START)
    end = text.find(TEXT_ANALYSIS_END, start) if start != -1 else -1
    if end == -1:
        return text.rstrip() + trailer
    return text[:end].rstrip() + trailer + text[end:]
