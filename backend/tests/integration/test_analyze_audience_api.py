"""Integration tests for POST /api/v1/analyze-audience.

The AI gateway is an AsyncMock; the credit debit is spied with
patch.object(..., wraps=...) so calls can be counted while still hitting the
ledger.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from copydrive.components.ai_gateway import InsufficientCreditsError, RateLimitError
from copydrive.components.audience import AUDIENCE_FIELDS
from copydrive.repositories import credit_repository, project_repository, prompt_template_repository

from helpers import long_text, make_analysis, tool_result

URL = "/api/v1/analyze-audience"

SEGMENT = {
    "id": "seg-1",
    "who_is": "Mulheres de 30 a 45 anos, empreendedoras",
    "biggest_desire": "Liberdade financeira",
    "biggest_pain": "Falta de tempo",
    "failed_attempts": "Cursos genéricos",
    "beliefs": "Acha que precisa de muito dinheiro para começar",
    "behavior": "Consome conteúdo no Instagram à noite",
    "journey": "Pesquisa muito antes de comprar",
}


@pytest.fixture
def owner(make_user):
    return make_user(credits=10.0)


@pytest.fixture
def debit_spy():
    with patch.object(
        credit_repository, "debit_workspace_credits", wraps=credit_repository.debit_workspace_credits
    ) as spy:
        yield spy


def payload(workspace_id: str, **extra) -> dict:
    return {"segment": SEGMENT, "workspace_id": workspace_id, **extra}


class TestAnalyzeAudienceSuccess:
    """200 responses."""

    def test_complete_first_attempt(self, client, gateway, owner, auth_headers, debit_spy):
        user, workspace = owner
        gateway.complete_with_tool.return_value = tool_result(make_analysis(), prompt=1000, completion=2000)

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 200
        data = response.json()
        for name, _ in AUDIENCE_FIELDS:
            assert len(data["analysis"][name]) >= 150
        assert data["analysis"]["mental_triggers"]["escassez"] == {"rank": 1, "justificativa": "Justificativa para escassez"}
        assert data["tokens_used"] == 3000
        assert data["credits_debited"] == 0.3
        assert gateway.complete_with_tool.await_count == 1
        debit_spy.assert_called_once()

        tool = gateway.complete_with_tool.await_args.args[1]
        assert tool["function"]["name"] == "generate_audience_analysis"
        assert len(tool["function"]["parameters"]["required"]) == 16

    def test_repair_of_short_fields(self, client, gateway, owner, auth_headers, debit_spy, db_session: Session):
        user, workspace = owner
        short = ("hidden_pain", "primary_fear")
        gateway.complete_with_tool.side_effect = [
            tool_result(make_analysis(short=short), prompt=1000, completion=2000),
            tool_result(
                {"hidden_pain": long_text("hidden_pain"), "primary_fear": long_text("primary_fear"), "intruder": "x"},
                prompt=300,
                completion=400,
            ),
        ]

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 200
        data = response.json()
        for name, _ in AUDIENCE_FIELDS:
            assert len(data["analysis"][name]) >= 150
        assert "intruder" not in data["analysis"]
        assert data["tokens_used"] == 3700
        assert data["credits_debited"] == 0.37

        repair_tool = gateway.complete_with_tool.await_args_list[1].args[1]
        assert repair_tool["function"]["name"] == "complete_audience_analysis"
        assert set(repair_tool["function"]["parameters"]["properties"]) == set(short)

        debit_spy.assert_called_once()
        kwargs = debit_spy.call_args.kwargs
        assert (kwargs["tokens_used"], kwargs["input_tokens"], kwargs["output_tokens"]) == (3700, 1300, 2400)
        assert kwargs["user_id"] == user.id
        assert credit_repository.get_balance(db_session, workspace.id) == pytest.approx(9.63)

    def test_missing_usage_bills_estimate(self, client, gateway, owner, auth_headers, debit_spy):
        user, workspace = owner
        gateway.complete_with_tool.return_value = tool_result(make_analysis(), prompt=0, completion=0)

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["tokens_used"] == 5000
        assert debit_spy.call_args.kwargs["tokens_used"] == 5000

    def test_analysis_stored_in_project_segment(self, client, gateway, owner, auth_headers, db_session: Session):
        user, workspace = owner
        project = project_repository.create(
            db_session,
            {"workspace_id": workspace.id, "name": "Lançamento", "audience_segments": [dict(SEGMENT)]},
        )
        gateway.complete_with_tool.return_value = tool_result(make_analysis())

        response = client.post(URL, json=payload(workspace.id, project_id=project.id), headers=auth_headers(user))

        assert response.status_code == 200
        db_session.expire_all()
        segment = project_repository.get_by_id(db_session, project.id).audience_segments[0]
        assert segment["advanced_analysis"]["hidden_pain"] == response.json()["analysis"]["hidden_pain"]

    def test_storage_failure_still_returns_paid_analysis(self, client, gateway, owner, auth_headers, db_session):
        user, workspace = owner
        project = project_repository.create(
            db_session,
            {"workspace_id": workspace.id, "name": "Lançamento", "audience_segments": [dict(SEGMENT)]},
        )
        gateway.complete_with_tool.return_value = tool_result(make_analysis(), prompt=1000, completion=2000)

        with patch.object(project_repository, "save_segment_analysis", side_effect=SQLAlchemyError("disk full")):
            response = client.post(URL, json=payload(workspace.id, project_id=project.id), headers=auth_headers(user))

        assert response.status_code == 200
        assert len(response.json()["analysis"]["hidden_pain"]) >= 150
        assert response.json()["credits_debited"] == 0.3
        db_session.expire_all()
        assert credit_repository.get_balance(db_session, workspace.id) == pytest.approx(9.7)

    def test_system_prompt_from_template(self, client, gateway, owner, auth_headers, db_session: Session):
        user, workspace = owner
        prompt_template_repository.create(
            db_session,
            {
                "prompt_key": "analyze_audience_base",
                "name": "Análise de público",
                "current_prompt": "Prompt customizado",
                "default_prompt": "Prompt padrão",
            },
        )
        gateway.complete_with_tool.return_value = tool_result(make_analysis())

        client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        messages = gateway.complete_with_tool.await_args.args[0]
        assert messages[0] == {"role": "system", "content": "Prompt customizado"}
        assert "Liberdade financeira" in messages[1]["content"]


class TestAnalyzeAudienceFailures:
    """Error responses."""

    def test_repair_still_short_returns_422(self, client, gateway, owner, auth_headers, debit_spy, db_session):
        user, workspace = owner
        gateway.complete_with_tool.side_effect = [
            tool_result(make_analysis(short=("hidden_pain", "limiting_belief"))),
            tool_result({"hidden_pain": long_text("hidden_pain"), "limiting_belief": "ainda curto"}),
        ]

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "incomplete_analysis"
        assert data["incomplete_fields"] == ["limiting_belief"]
        assert "repair_error" not in data
        debit_spy.assert_not_called()
        assert credit_repository.get_balance(db_session, workspace.id) == 10.0

    def test_at_most_one_repair_call(self, client, gateway, owner, auth_headers, debit_spy):
        user, workspace = owner
        gateway.complete_with_tool.return_value = tool_result(make_analysis(short=("hidden_pain",)))

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 422
        assert response.json()["incomplete_fields"] == ["hidden_pain"]
        assert gateway.complete_with_tool.await_count == 2
        debit_spy.assert_not_called()

    def test_repair_call_failure_returns_422(self, client, gateway, owner, auth_headers, debit_spy):
        user, workspace = owner
        gateway.complete_with_tool.side_effect = [
            tool_result(make_analysis(short=("hidden_pain",))),
            RuntimeError("upstream timeout"),
        ]

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 422
        assert response.json()["incomplete_fields"] == ["hidden_pain"]
        assert response.json()["repair_error"] == "upstream timeout"
        debit_spy.assert_not_called()

    def test_rate_limit_on_first_call(self, client, gateway, owner, auth_headers, debit_spy):
        user, workspace = owner
        gateway.complete_with_tool.side_effect = RateLimitError()

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 429
        assert response.json()["error"] == "rate_limit"
        assert gateway.complete_with_tool.await_count == 1
        debit_spy.assert_not_called()

    def test_insufficient_credits(self, client, gateway, owner, auth_headers, debit_spy):
        user, workspace = owner
        gateway.complete_with_tool.side_effect = InsufficientCreditsError()

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 402
        assert response.json()["error"] == "insufficient_credits"
        debit_spy.assert_not_called()

    def test_unexpected_error_returns_500(self, client, gateway, owner, auth_headers):
        user, workspace = owner
        gateway.complete_with_tool.side_effect = RuntimeError("boom")

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(user))

        assert response.status_code == 500
        assert response.json() == {"error": "internal_error", "message": "boom"}

    @pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer not-a-token"}, {"Authorization": "Basic abc"}])
    def test_unauthenticated(self, client, gateway, owner, headers):
        _, workspace = owner

        response = client.post(URL, json=payload(workspace.id), headers=headers)

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"
        gateway.complete_with_tool.assert_not_awaited()

    @pytest.mark.parametrize(
        "body",
        [
            {"workspace_id": "ws_x"},
            {"segment": SEGMENT},
            {"segment": SEGMENT, "workspace_id": ""},
        ],
    )
    def test_missing_required_fields(self, client, gateway, owner, auth_headers, body):
        user, _ = owner

        response = client.post(URL, json=body, headers=auth_headers(user))

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_request"
        gateway.complete_with_tool.assert_not_awaited()

    def test_not_a_member(self, client, gateway, owner, make_user, auth_headers):
        _, workspace = owner
        stranger, _ = make_user(email="eve@example.com")

        response = client.post(URL, json=payload(workspace.id), headers=auth_headers(stranger))

        assert response.status_code == 403
        gateway.complete_with_tool.assert_not_awaited()
