"""Prompt builders for the advanced audience analysis."""

from collections.abc import Mapping
from typing import Any

from copydrive.components.structured import FieldRegistry

FALLBACK_SYSTEM_PROMPT = (
    "Você é um especialista em psicologia do consumidor, antropologia cultural e análise "
    "comportamental. Foque apenas em entender o público profundamente, sem sugerir "
    "estratégias de vendas."
)

# (segment key, label) in the order the questionnaire asks them
SEGMENT_QUESTIONS: list[tuple[str, str]] = [
    ("who_is", "Quem é"),
    ("biggest_desire", "Maior desejo"),
    ("biggest_pain", "Maior dor"),
    ("failed_attempts", "Tentativas falhas"),
    ("beliefs", "Crenças limitantes"),
    ("behavior", "Comportamento"),
    ("journey", "Jornada"),
]

IDENTITY_LABELS: list[tuple[str, str]] = [
    ("brand_name", "Marca"),
    ("sector", "Setor"),
    ("central_purpose", "Propósito central"),
    ("brand_personality", "Personalidade da marca"),
    ("voice_tones", "Tons de voz"),
    ("keywords", "Palavras-chave"),
]


def _text(value: Any) -> str:
    if isinstance(value, list | tuple):
        return ", ".join(str(v) for v in value if v)
    return str(value) if value is not None else ""


def format_project_context(project_context: Mapping[str, Any] | None) -> str:
    """Brand identity block, empty when no identity field is filled."""
    if not project_context:
        return ""
    lines = [
        f"- **{label}:** {_text(project_context.get(key))}"
        for key, label in IDENTITY_LABELS
        if project_context.get(key)
    ]
    if not lines:
        return ""
    return "**CONTEXTO DO PROJETO:**\n\n" + "\n".join(lines)


def format_segment_answers(segment: Mapping[str, Any]) -> str:
    lines = [
        f"{i}. **{label}:** {_text(segment.get(key)) or 'Não informado'}"
        for i, (key, label) in enumerate(SEGMENT_QUESTIONS, start=1)
    ]
    return "**DADOS DO PÚBLICO:**\n\n" + "\n".join(lines)


def build_analysis_prompt(
    segment: Mapping[str, Any],
    project_context: Mapping[str, Any] | None,
    min_length: int,
) -> str:
    """User prompt for the first analysis call."""
    parts = []
    context = format_project_context(project_context)
    if context:
        parts.append(context)
    parts.append(format_segment_answers(segment))
    parts.append(
        "---\n\n"
        "Analise profundamente esse público do ponto de vista antropológico e psicológico.\n"
        "Seja específico, detalhado e focado em ENTENDER verdadeiramente quem é essa pessoa.\n"
        f"Cada campo da análise deve ter NO MÍNIMO {min_length} caracteres, com exemplos concretos.\n"
        "Classifique também os 8 gatilhos mentais de 1 (mais eficaz) a 8 (menos eficaz) para este público, "
        "com uma justificativa para cada um."
    )
    return "\n\n".join(parts)


def build_repair_prompt(
    registry: FieldRegistry,
    incomplete: list[str],
    analysis: Mapping[str, Any],
    segment: Mapping[str, Any],
) -> str:
    """User prompt asking to rewrite exactly the deficient fields."""
    current = "\n".join(
        f"- {name}: \"{_text(analysis.get(name))}\" ({len(_text(analysis.get(name)).strip())} caracteres)"
        for name in incomplete
    )
    return (
        "A análise anterior deste público ficou incompleta. Os campos abaixo estão ausentes "
        "ou abaixo do tamanho mínimo:\n\n"
        f"{registry.describe(incomplete)}\n\n"
        f"**TEXTO ATUAL DOS CAMPOS DEFICIENTES:**\n\n{current}\n\n"
        f"{format_segment_answers(segment)}\n\n"
        "---\n\n"
        "Reescreva SOMENTE esses campos, de forma profunda e específica, respeitando o mínimo "
        "de caracteres de cada um. Não repita os outros campos."
    )
