"""Integration tests for POST /api/v1/optimize-copy."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from copydrive.components.ai_gateway import AIGatewayError, InsufficientCreditsError, RateLimitError
from copydrive.db.models import AIGenerationHistory
from copydrive.repositories import credit_repository, generation_history_repository

from helpers import tool_result

URL = "/api/v1/optimize-copy"

ORIGINAL = [
    {
        "id": "s1",
        "title": "Abertura",
        "blocks": [
            {"id": "b1", "type": "headline", "content": "Título antigo", "config": {"fontSize": "32px"}},
            {"id": "b2", "type": "text", "content": "Texto de apoio"},
        ],
    },
    {
        "id": "s2",
        "title": "Chamada",
        "blocks": [{"id": "b3", "type": "list", "content": ["Item um", "Item dois"]}],
    },
]

GENERATED = {
    "sessions": [
        {
            "title": "Abertura nova",
            "blocks": [
                {"type": "headline", "content": "Título novo", "config": {"fontSize": "32px"}},
                {"type": "text", "content": "Texto novo"},
            ],
        },
        {"title": "Chamada nova", "blocks": [{"type": "list", "content": ["Um", "Dois"]}]},
    ]
}


@pytest.fixture
def owner(make_user):
    return make_user()


def payload(workspace_id: str, **overrides) -> dict:
    body = {
        "action": "otimizar",
        "originalContent": ORIGINAL,
        "instructions": "Deixe mais persuasivo",
        "copyId": "copy-1",
        "workspaceId": workspace_id,
    }
    body.update(overrides)
    return body


class TestOptimizeCopySuccess:
    """200 responses."""

    def test_optimize_returns_stamped_sessions(self, client, gateway, owner, auth_headers):
        user, workspace = owner
        gateway.complete_with_tool.return_value = tool_result(GENERATED)

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 200
        sessions = response.json()["sessions"]
        assert [s["title"] for s in sessions] == ["Abertura nova", "Chamada nova"]

        ids = [s["id"] for s in sessions] + [b["id"] for s in sessions for b in s["blocks"]]
        assert len(ids) == len(set(ids)) == 5
        assert all(s["id"].startswith("optimize-session") for s in sessions)
        assert sessions[0]["blocks"][1]["config"] == {}
        assert sessions[0]["blocks"][0]["config"] == {"fontSize": "32px"}

    def test_optimize_prompt_keeps_structure(self, client, gateway, owner, auth_headers):
        user, workspace = owner
        gateway.complete_with_tool.return_value = tool_result(GENERATED)

        client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        messages, tool = gateway.complete_with_tool.await_args.args
        assert tool["function"]["name"] == "generate_copy"
        assert "exatamente 2 sessões e 3 blocos" in messages[1]["content"]
        assert "Deixe mais persuasivo" in messages[1]["content"]
        assert "Item um" in messages[1]["content"]

    def test_variation_prompt_and_context(self, client, gateway, owner, auth_headers):
        user, workspace = owner
        gateway.complete_with_tool.return_value = tool_result(GENERATED)
        body = payload(
            workspace.id,
            action="variacao",
            projectIdentity={"brand_name": "Acme"},
            audienceSegment={"who_is": "Pequenos empresários"},
            offer={"name": "Mentoria"},
        )

        response = client.post(URL, json=body, headers=auth_headers(user))

        assert response.status_code == 200
        content = gateway.complete_with_tool.await_args.args[0][1]["content"]
        assert "versão alternativa" in content
        assert "Acme" in content
        assert "Pequenos empresários" in content
        assert "Mentoria" in content

    def test_history_row_written(self, client, gateway, owner, auth_headers, db_session):
        user, workspace = owner
        gateway.complete_with_tool.return_value = tool_result(GENERATED, prompt=400, completion=600)

        client.post(URL, json=payload(workspace.id, action="variacao"), headers=auth_headers(user))

        rows = generation_history_repository.list_for_workspace(db_session, workspace.id)
        assert len(rows) == 1
        row: AIGenerationHistory = rows[0]
        assert row.copy_id == "copy-1"
        assert row.created_by == user.id
        assert row.generation_type == "variation"
        assert row.generation_category == "text"
        assert (row.input_tokens, row.output_tokens, row.total_tokens) == (400, 600, 1000)
        assert row.parameters["action"] == "variacao"
        assert len(row.sessions) == 2

    def test_does_not_debit_credits(self, client, gateway, owner, auth_headers, db_session):
        user, workspace = owner
        gateway.complete_with_tool.return_value = tool_result(GENERATED)

        client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert credit_repository.get_balance(db_session, workspace.id) == 10.0

    def test_history_failure_is_not_fatal(self, client, gateway, owner, auth_headers):
        user, workspace = owner
        gateway.complete_with_tool.return_value = tool_result(GENERATED)

        with patch.object(generation_history_repository, "record", side_effect=SQLAlchemyError("db down")):
            response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 200
        assert len(response.json()["sessions"]) == 2


class TestOptimizeCopyFailures:
    """Error responses."""

    def test_invalid_action(self, client, gateway, owner, auth_headers):
        user, workspace = owner

        response = client.post(URL, json=payload(workspace.id, action="resumir"), headers=auth_headers(user))

        assert response.status_code == 400
        assert "action" in response.json()["fields"]
        gateway.complete_with_tool.assert_not_awaited()

    def test_unauthenticated(self, client, gateway, owner):
        _, workspace = owner

        response = client.post(URL, json=payload(workspace.id))

        assert response.status_code == 401
        gateway.complete_with_tool.assert_not_awaited()

    def test_not_a_member(self, client, gateway, owner, make_user, auth_headers):
        _, workspace = owner
        stranger, _ = make_user(email="eve@example.com")

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(stranger))

        assert response.status_code == 403
        gateway.complete_with_tool.assert_not_awaited()

    @pytest.mark.parametrize(
        "error, status, tag",
        [
            (RateLimitError(), 429, "rate_limit"),
            (InsufficientCreditsError(), 402, "insufficient_credits"),
            (AIGatewayError(status=503, body="unavailable"), 500, "ai_gateway_error"),
        ],
    )
    def test_gateway_errors(self, client, gateway, owner, auth_headers, db_session, error, status, tag):
        user, workspace = owner
        gateway.complete_with_tool.side_effect = error

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == status
        assert response.json()["error"] == tag
        assert generation_history_repository.list_for_workspace(db_session, workspace.id) == []

    def test_tool_call_without_sessions(self, client, gateway, owner, auth_headers):
        user, workspace = owner
        gateway.complete_with_tool.return_value = tool_result({"sessions": "nope"})

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 500
        assert response.json()["error"] == "ai_gateway_error"

    def test_unexpected_error(self, client, gateway, owner, auth_headers):
        user, workspace = owner
        gateway.complete_with_tool.side_effect = ValueError("bad state")

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 500
        assert response.json() == {"error": "internal_error", "message": "bad state"}
