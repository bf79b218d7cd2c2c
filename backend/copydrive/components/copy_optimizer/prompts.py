"""Prompt builders for copy optimization and variation."""

from collections.abc import Mapping, Sequence
from typing import Any

from copydrive.components.audience.fields import AUDIENCE_FIELDS

OPTIMIZE = "otimizar"
VARIATION = "variacao"
ACTIONS = (OPTIMIZE, VARIATION)

_BASE_PROMPT = "Você é um especialista em copywriting e marketing digital."

_BLOCK_GUIDE = """SELEÇÃO INTELIGENTE DE BLOCOS:
- Use apenas os tipos de blocos adequados ao contexto
- headline: Use para títulos principais impactantes
- subheadline: Use para complementar headlines, adicionar contexto
- text: Use para parágrafos explicativos e corpo do texto
- list: Use para enumerar benefícios, features, etapas (IMPORTANTE: content deve ser array de strings)
- button: Use para CTAs claros (IMPORTANTE: config.link é obrigatório)"""

_OPTIMIZE_RULES = """Sua tarefa é OTIMIZAR o conteúdo fornecido, mantendo a estrutura similar mas melhorando:
- Clareza e impacto da mensagem
- Persuasão e engajamento
- Qualidade da escrita
- Flow e coerência

REGRAS DE OTIMIZAÇÃO:
1. Mantenha a mesma quantidade de sessões e de blocos
2. Mantenha os tipos de blocos (se tem headline, mantenha headline)
3. Preserve a estrutura geral e ordem lógica
4. Foque em melhorar o conteúdo, não em mudar radicalmente
5. Mantenha o tom e voz, apenas refine"""

_VARIATION_RULES = """Sua tarefa é CRIAR UMA VARIAÇÃO do conteúdo fornecido:
- Pode alterar abordagem e estrutura livremente
- Pode mudar tipos e quantidade de blocos
- Mantenha a mensagem central e objetivo
- Explore diferentes ângulos e formatos
- Seja criativo e traga uma perspectiva nova

REGRAS DE VARIAÇÃO:
1. Mantenha o objetivo final do conteúdo
2. Pode reorganizar completamente a estrutura
3. Pode usar mais ou menos blocos conforme necessário
4. Explore ângulos diferentes (emocional vs racional, urgência vs benefício, etc)
5. Mantenha alta qualidade e persuasão"""

_CLOSING = """INSTRUÇÕES IMPORTANTES:
1. Retorne o conteúdo usando a ferramenta generate_copy
2. Mantenha alta qualidade e persuasão
3. Para listas (type: list), content DEVE ser um array de strings
4. Para botões (type: button), config.link é OBRIGATÓRIO
5. Use apenas blocos que fazem sentido para o contexto"""

_BASIC_PROFILE = [
    ("who_is", "Quem é"),
    ("biggest_desire", "Maior desejo"),
    ("biggest_pain", "Maior dor"),
    ("failed_attempts", "Tentativas que falharam"),
    ("beliefs", "Crenças"),
    ("behavior", "Comportamento"),
    ("journey", "Jornada"),
]


def build_system_prompt(action: str) -> str:
    rules = _OPTIMIZE_RULES if action == OPTIMIZE else _VARIATION_RULES
    return f"{_BASE_PROMPT}\n\n{rules}\n\n{_BLOCK_GUIDE}"


def _join(value: Any) -> str:
    if isinstance(value, list | tuple):
        return ", ".join(str(v) for v in value)
    return str(value)


def _identity_section(identity: Mapping[str, Any]) -> str:
    lines = ["IDENTIDADE DA MARCA:"]
    for key, label in (
        ("brand_name", "Nome"),
        ("sector", "Setor"),
        ("central_purpose", "Propósito Central"),
        ("brand_personality", "Personalidade da Marca"),
        ("voice_tones", "Tons de Voz"),
        ("keywords", "Palavras-chave"),
    ):
        if identity.get(key):
            lines.append(f"- {label}: {_join(identity[key])}")
    return "\n".join(lines)


def _audience_section(segment: Mapping[str, Any]) -> str:
    lines = ["PÚBLICO-ALVO:", "", "=== PERFIL BÁSICO (Preenchimento Manual) ==="]
    for key, label in _BASIC_PROFILE:
        if segment.get(key):
            lines.append(f"{label}: {segment[key]}")

    analysis = segment.get("advanced_analysis")
    if isinstance(analysis, Mapping) and analysis:
        lines += ["", "=== ANÁLISE AVANÇADA (Perfil Psicográfico Profundo) ==="]
        for name, description in AUDIENCE_FIELDS:
            if analysis.get(name):
                label = description.split(":", 1)[0]
                lines += ["", f"{label}:", str(analysis[name])]
    return "\n".join(lines)


def _offer_section(offer: Mapping[str, Any]) -> str:
    lines = ["OFERTA:"]
    if offer.get("name"):
        lines.append(f"- Nome: {offer['name']}")
    description = offer.get("description") or offer.get("short_description")
    if description:
        lines.append(f"- Descrição: {description}")
    if offer.get("main_benefit"):
        lines.append(f"- Benefício principal: {offer['main_benefit']}")
    if offer.get("key_benefits"):
        lines.append(f"- Benefícios: {_join(offer['key_benefits'])}")
    if offer.get("price"):
        lines.append(f"- Preço: {offer['price']}")
    return "\n".join(lines)


def format_original_content(sessions: Sequence[Mapping[str, Any]]) -> str:
    lines = ["CONTEÚDO ORIGINAL:"]
    for i, session in enumerate(sessions, start=1):
        lines.append("")
        lines.append(f"Sessão {i}: {session.get('title', '')}")
        for j, block in enumerate(session.get("blocks") or [], start=1):
            content = block.get("content")
            if isinstance(content, list):
                content = "\n  - ".join(str(item) for item in content)
            lines.append(f"  Bloco {j} [{block.get('type')}]: {content}")
    return "\n".join(lines)


def build_user_prompt(
    action: str,
    original_content: Sequence[Mapping[str, Any]],
    instructions: str,
    project_identity: Mapping[str, Any] | None = None,
    audience_segment: Mapping[str, Any] | None = None,
    offer: Mapping[str, Any] | None = None,
    regenerate_instructions: str | None = None,
) -> str:
    """User prompt with the project context, the original copy and the instructions."""
    sections = []
    if project_identity:
        sections.append(_identity_section(project_identity))
    if audience_segment:
        sections.append(_audience_section(audience_segment))
    if offer:
        sections.append(_offer_section(offer))

    sections.append(format_original_content(original_content))
    sections.append(f"INSTRUÇÕES DO USUÁRIO:\n{instructions}")

    if regenerate_instructions:
        sections.append(f"INSTRUÇÕES EXTRAS PARA REGENERAÇÃO:\n{regenerate_instructions}")

    if action == OPTIMIZE:
        session_count = len(original_content)
        block_count = sum(len(s.get("blocks") or []) for s in original_content)
        sections.append(
            f"Mantenha exatamente {session_count} sessões e {block_count} blocos no total, "
            "com os mesmos tipos de bloco em cada sessão. Apenas melhore o conteúdo mantendo a estrutura."
        )
    else:
        sections.append("Crie uma versão alternativa completa. Pode alterar estrutura e abordagem.")

    sections.append(_CLOSING)
    return "\n\n".join(sections)
