"""Tool schema for copy generation and ID stamping of the returned sessions."""

from typing import Any

from copydrive.components.ai_gateway import build_function_tool
from copydrive.utils.id_generator import generate_element_id

COPY_TOOL_NAME = "generate_copy"

BLOCK_TYPES = ["headline", "subheadline", "text", "list", "button"]

BLOCK_CONFIG_KEYS = ["fontSize", "textAlign", "color", "backgroundColor", "textColor", "buttonSize", "link"]


def copy_schema() -> dict:
    """Sessions/blocks JSON Schema accepted by the editor."""
    block = {
        "type": "object",
        "properties": {
            "type": {"type": "string", "enum": BLOCK_TYPES, "description": "Tipo do bloco"},
            "content": {
                "description": "Conteúdo - string para text/headline/subheadline/button, array para list",
                "oneOf": [
                    {"type": "string"},
                    {"type": "array", "items": {"type": "string"}},
                ],
            },
            "config": {
                "type": "object",
                "description": (
                    "Configurações do bloco (fontSize, textAlign, color, etc). "
                    "SEMPRE inclua config vazio {} mesmo se não tiver configurações específicas."
                ),
                "properties": {key: {"type": "string"} for key in BLOCK_CONFIG_KEYS},
            },
        },
        "required": ["type", "content", "config"],
    }
    session = {
        "type": "object",
        "properties": {
            "title": {"type": "string", "description": "Título da sessão"},
            "blocks": {"type": "array", "items": block},
        },
        "required": ["title", "blocks"],
    }
    return {
        "type": "object",
        "properties": {"sessions": {"type": "array", "items": session}},
        "required": ["sessions"],
    }


def copy_tool() -> dict:
    return build_function_tool(
        COPY_TOOL_NAME,
        "Gera ou otimiza conteúdo de copy estruturado em sessões e blocos",
        copy_schema(),
    )


def stamp_ids(sessions: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Give every session and block a fresh ID and a non-null config.

    Returns new dicts; the input is left untouched.
    """
    stamped = []
    for session_index, session in enumerate(sessions):
        blocks = []
        for block_index, block in enumerate(session.get("blocks") or []):
            blocks.append(
                {
                    **block,
                    "id": generate_element_id("optimize-block", session_index, block_index),
                    "config": block["config"] if isinstance(block.get("config"), dict) else {},
                }
            )
        stamped.append(
            {
                **session,
                "id": generate_element_id("optimize-session", session_index),
                "blocks": blocks,
            }
        )
    return stamped
