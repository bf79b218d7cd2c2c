"""Advanced audience analysis fields and mental trigger ranking."""

from typing import Any

from copydrive.components.structured import FieldRegistry, FieldSpec
from copydrive.settings import settings

# (name, description) in output order
AUDIENCE_FIELDS: list[tuple[str, str]] = [
    (
        "psychographic_profile",
        "Perfil psicográfico: valores centrais, estilo de vida, traços de personalidade, "
        "identidade social e autoimagem (como se vê e como quer ser vista)",
    ),
    (
        "consciousness_level",
        "Nível de consciência (Eugene Schwartz): estágio atual, o que já sabe, o que ainda não "
        "percebeu e as barreiras mentais para avançar",
    ),
    (
        "emotional_state",
        "Estado emocional: emoções dominantes, intensidade, gatilhos e padrões de oscilação",
    ),
    (
        "hidden_pain",
        "Dor oculta: a dor real não verbalizada, o sofrimento subjacente, o que tira o sono",
    ),
    (
        "primary_fear",
        "Medo primário: medo fundamental que dirige os comportamentos e as consequências temidas",
    ),
    (
        "emotional_desire",
        "Desejo emocional: estado emocional desejado, como quer se sentir e ser vista",
    ),
    (
        "problem_misperception",
        "Percepção errada do problema: diagnóstico equivocado, onde coloca a culpa, "
        "distância entre o problema percebido e o real",
    ),
    (
        "internal_mechanism",
        "Mecanismo interno do problema: o loop comportamental e mental que perpetua o problema",
    ),
    (
        "limiting_belief",
        "Crença limitante: crença central que sabota o progresso, sua origem e manifestações",
    ),
    (
        "internal_narrative",
        "Narrativa interna: a história que conta para si mesma e o papel que se atribui no problema",
    ),
    (
        "internal_contradiction",
        "Contradição interna: conflitos entre desejos e ações, valores conflitantes, ambivalência",
    ),
    (
        "dominant_behavior",
        "Comportamento dominante: padrão de ação mais frequente, situações gatilho e a função que cumpre",
    ),
    (
        "decision_trigger",
        "Gatilho de decisão: o que finalmente a faz agir e os eventos que aceleram a decisão",
    ),
    (
        "communication_style",
        "Estilo de comunicação: vocabulário, tom natural, expressões, gírias e metáforas que usa",
    ),
    (
        "psychological_resistances",
        "Resistências psicológicas: barreiras emocionais, auto-sabotagem e objeções internas",
    ),
]

MENTAL_TRIGGERS: dict[str, str] = {
    "escassez": "Escassez",
    "autoridade": "Autoridade",
    "prova_social": "Prova Social",
    "reciprocidade": "Reciprocidade",
    "consistencia": "Consistência",
    "afinidade": "Afinidade",
    "antecipacao": "Antecipação",
    "exclusividade": "Exclusividade",
}

MIN_RANK = 1
MAX_RANK = len(MENTAL_TRIGGERS)


def mental_triggers_schema() -> dict:
    """Schema of the ranked mental triggers object."""
    trigger_schema = {
        "type": "object",
        "properties": {
            "rank": {
                "type": "integer",
                "minimum": MIN_RANK,
                "maximum": MAX_RANK,
                "description": f"Posição de eficácia para este público ({MIN_RANK} = mais eficaz)",
            },
            "justificativa": {
                "type": "string",
                "description": "Por que este gatilho funciona (ou não) com este público",
            },
        },
        "required": ["rank", "justificativa"],
        "additionalProperties": False,
    }
    return {
        "type": "object",
        "description": "Ranking dos 8 gatilhos mentais por eficácia para este público",
        "properties": {name: trigger_schema for name in MENTAL_TRIGGERS},
        "required": list(MENTAL_TRIGGERS),
        "additionalProperties": False,
    }


def build_audience_registry(min_length: int | None = None) -> FieldRegistry:
    """Registry for the 15 analysis fields plus the mental_triggers object."""
    floor = min_length if min_length is not None else settings.analysis_min_field_length
    return FieldRegistry(
        (FieldSpec(name, description, floor) for name, description in AUDIENCE_FIELDS),
        extra_properties={"mental_triggers": mental_triggers_schema()},
        extra_required=["mental_triggers"],
    )


def normalize_mental_triggers(value: Any) -> dict[str, dict] | None:
    """Clamp ranks to 1..8 and drop unknown or malformed triggers.

    Missing triggers are left out.
    """
    if not isinstance(value, dict):
        return None

    normalized: dict[str, dict] = {}
    for name in MENTAL_TRIGGERS:
        entry = value.get(name)
        if not isinstance(entry, dict):
            continue
        try:
            rank = int(entry.get("rank"))
        except (TypeError, ValueError):
            continue
        normalized[name] = {
            "rank": min(max(rank, MIN_RANK), MAX_RANK),
            "justificativa": str(entry.get("justificativa") or ""),
        }
    return normalized
