"""Messaging and sequences resources over a recording transport."""

from __future__ import annotations

import pytest

from lumnisai._http import Http, HttpOptions
from lumnisai.errors import (
    MessagingNotFoundError,
    MessagingValidationError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from lumnisai.resources import MessagingResource, SequencesResource
from tests.helpers import BASE_URL, RecordingTransport, json_response

pytestmark = pytest.mark.unit


def _resource(cls, payload=None, status: int = 200):
    recorder = RecordingTransport(lambda _r: json_response(status, payload))
    http = Http(
        HttpOptions(base_url=BASE_URL, api_prefix="/v1", max_retries=0),
        transport=recorder.transport(),
    )
    return cls(http), recorder


CONVERSATION = {
    "id": "c1",
    "channel": "linkedin",
    "status": "needs_response",
    "prospect_name": "Ada",
    "message_count": 3,
    "network_distance": "SECOND_DEGREE",
}

TEMPLATE = {
    "name": "Warm intro",
    "steps": [
        {
            "step_key": "intro",
            "name": "Connect",
            "channel": "linkedin",
            "action": "connection_request",
            "content_source": "ai_generate",
        }
    ],
    "transitions": [
        {"from_step_key": None, "to_step_key": "intro", "event_type": "step_completed"}
    ],
}


# =============================================================================
# Messaging: client-side checks
# =============================================================================


@pytest.mark.asyncio
async def test_sync_requires_prospects() -> None:
    messaging, recorder = _resource(MessagingResource, {})
    with pytest.raises(MessagingValidationError, match="must not be empty") as exc:
        await messaging.sync_conversations("u1", {"prospects": []})
    assert exc.value.code == "VALIDATION_ERROR"
    assert isinstance(exc.value, ValidationError)
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_sync_requires_an_identifier_per_prospect() -> None:
    messaging, recorder = _resource(MessagingResource, {})
    with pytest.raises(MessagingValidationError, match="at least one identifier"):
        await messaging.sync_conversations(
            "u1",
            {"prospects": [{"email": "ada@example.com"}, {"prospect_id": "p2"}]},
        )
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_sync_posts_prospects_for_user() -> None:
    messaging, recorder = _resource(
        MessagingResource,
        {"job_id": "j1", "status": "queued", "stats": {"synced": 0}},
    )
    job = await messaging.sync_conversations(
        "ada@example.com",
        {
            "prospects": [{"prospect_id": "p1", "linkedin_url": "https://li/in/a"}],
            "channels": ["linkedin"],
        },
    )

    request = recorder.requests[0]
    assert request.url.path == "/v1/messaging/sync"
    assert request.url.params["user_id"] == "ada@example.com"
    assert recorder.json_bodies()[0] == {
        "prospects": [{"prospect_id": "p1", "linkedin_url": "https://li/in/a"}],
        "channels": ["linkedin"],
    }
    assert job.job_id == "j1"
    assert job.stats is not None and job.stats.synced == 0


@pytest.mark.asyncio
async def test_prior_contact_requires_an_identifier() -> None:
    messaging, recorder = _resource(MessagingResource, {})
    with pytest.raises(MessagingValidationError, match="At least one of"):
        await messaging.check_prior_contact("u1", {"channels": ["gmail"]})
    with pytest.raises(MessagingValidationError, match="Prospect 'p2'"):
        await messaging.batch_check_prior_contact(
            "u1",
            {
                "prospects": [
                    {"prospect_id": "p1", "email": "a@example.com"},
                    {"prospect_id": "p2"},
                ]
            },
        )
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_prior_contact_sends_only_given_fields() -> None:
    messaging, recorder = _resource(
        MessagingResource,
        {
            "has_prior_contact": True,
            "channels_checked": ["gmail", "outlook"],
            "channels_with_contact": ["gmail"],
            "contact_history": [
                {
                    "channel": "gmail",
                    "has_contact": True,
                    "is_user_initiated": True,
                    "message_count": 2,
                    "messages": [],
                }
            ],
            "cached": True,
        },
    )
    result = await messaging.check_prior_contact(
        "u1", {"email": "ada@example.com", "message_limit": 3}
    )

    assert recorder.json_bodies()[0] == {"email": "ada@example.com", "message_limit": 3}
    assert result.has_prior_contact is True
    assert result.contact_history[0].is_user_initiated is True
    assert result.cached is True


@pytest.mark.asyncio
async def test_batch_prior_contact_results_by_prospect() -> None:
    messaging, _ = _resource(
        MessagingResource,
        {
            "results": {
                "p1": {"prospect_id": "p1", "has_prior_contact": False},
            },
            "summary": {
                "total": 1,
                "with_contact": 0,
                "without_contact": 1,
                "errors": 0,
            },
        },
    )
    result = await messaging.batch_check_prior_contact(
        "u1", {"prospects": [{"prospect_id": "p1", "provider_id": "ACoA1"}]}
    )
    assert result.results["p1"].has_prior_contact is False
    assert result.summary.without_contact == 1


# =============================================================================
# Messaging: endpoints
# =============================================================================


@pytest.mark.asyncio
async def test_list_conversations_filters() -> None:
    messaging, recorder = _resource(MessagingResource, [CONVERSATION])
    conversations = await messaging.list_conversations(
        "u1", channel="linkedin", network_distance="SECOND_DEGREE", limit=10
    )

    assert dict(recorder.requests[0].url.params) == {
        "user_id": "u1",
        "channel": "linkedin",
        "network_distance": "SECOND_DEGREE",
        "limit": "10",
    }
    assert conversations[0].prospect_name == "Ada"
    assert conversations[0].network_distance == "SECOND_DEGREE"


@pytest.mark.asyncio
async def test_get_conversation_with_messages() -> None:
    payload = {
        "conversation": CONVERSATION,
        "messages": [
            {
                "id": "m1",
                "direction": "inbound",
                "content": "Hi!",
                "sender_name": "Ada",
                "sent_at": "2024-01-01T00:00:00Z",
            }
        ],
    }
    messaging, recorder = _resource(MessagingResource, payload)
    detail = await messaging.get_conversation("c1", "u1", fetch_live=True)

    request = recorder.requests[0]
    assert request.url.path == "/v1/messaging/conversations/c1"
    assert request.url.params["fetch_live"] == "true"
    assert detail.messages[0].sender_name == "Ada"


@pytest.mark.asyncio
async def test_delete_missing_conversation_is_rewrapped() -> None:
    messaging, _ = _resource(MessagingResource, {"detail": "Not Found"}, status=404)
    with pytest.raises(MessagingNotFoundError, match="Conversation c9 not found") as exc:
        await messaging.delete_conversation("c9", "u1")
    assert isinstance(exc.value, NotFoundError)
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_delete_invalid_conversation_is_rewrapped() -> None:
    messaging, _ = _resource(MessagingResource, {"detail": "bad id"}, status=400)
    with pytest.raises(MessagingValidationError, match="Invalid conversation ID"):
        await messaging.delete_conversation("nope", "u1")


@pytest.mark.asyncio
async def test_unlink_conversations_from_project() -> None:
    messaging, recorder = _resource(
        MessagingResource,
        {"success": True, "project_id": "proj1", "unlinked_count": 4},
    )
    result = await messaging.unlink_conversations_from_project("proj1", "u1")

    request = recorder.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/messaging/conversations/unlink-project"
    assert dict(request.url.params) == {"project_id": "proj1", "user_id": "u1"}
    assert request.content == b""
    assert result.unlinked_count == 4


@pytest.mark.asyncio
async def test_linkedin_credits_refresh_flag() -> None:
    payload = {
        "subscriptions": [
            {
                "type": "sales_navigator",
                "feature": "sales_navigator",
                "monthly_allowance": 50,
                "max_accumulation": 150,
                "is_active": True,
                "inmail_credits_remaining": 42,
            }
        ],
        "is_real_time": True,
        "can_send_inmail": True,
    }
    messaging, recorder = _resource(MessagingResource, payload)

    await messaging.get_linkedin_credits("u1")
    credits = await messaging.get_linkedin_credits("u1", force_refresh=True)

    assert "force_refresh" not in recorder.requests[0].url.params
    assert recorder.requests[1].url.params["force_refresh"] == "true"
    assert credits.subscriptions[0].inmail_credits_remaining == 42


@pytest.mark.asyncio
async def test_batch_send_drafts() -> None:
    messaging, recorder = _resource(
        MessagingResource,
        {
            "results": [{"success": True, "draft_id": "d1", "queued": True}],
            "sent": 0,
            "failed": 0,
            "queued": 1,
        },
    )
    result = await messaging.send_batch_drafts(
        "u1",
        {
            "draft_ids": ["d1"],
            "send_rate_per_day": 20,
            "draft_overrides": [{"draft_id": "d1", "skip_note": True}],
        },
    )

    assert recorder.requests[0].url.path == "/v1/messaging/drafts/batch/send"
    assert recorder.json_bodies()[0] == {
        "draft_ids": ["d1"],
        "send_rate_per_day": 20,
        "draft_overrides": [{"draft_id": "d1", "skip_note": True}],
    }
    assert result.queued == 1
    assert result.results[0].queued is True


@pytest.mark.asyncio
async def test_draft_response_schema_mismatch_is_typed() -> None:
    messaging, _ = _resource(MessagingResource, {"status": "pending_review"})
    with pytest.raises(ServerError) as exc:
        await messaging.send_draft("d1", "u1")
    assert exc.value.code == "INVALID_RESPONSE"


# =============================================================================
# Sequences
# =============================================================================


@pytest.mark.asyncio
async def test_create_template_sends_steps_and_owner() -> None:
    stored = {
        **TEMPLATE,
        "id": "tpl1",
        "version": 1,
        "is_archived": False,
        "created_at": "2024-01-01",
        "updated_at": "2024-01-01",
    }
    sequences, recorder = _resource(SequencesResource, stored)
    template = await sequences.create_template(TEMPLATE, "u1")

    request = recorder.requests[0]
    assert request.url.path == "/v1/sequences/templates"
    assert request.url.params["user_id"] == "u1"
    body = recorder.json_bodies()[0]
    assert body["steps"][0]["content_source"] == "ai_generate"
    assert body["transitions"] == [
        {"to_step_key": "intro", "event_type": "step_completed"}
    ]
    assert template.steps[0].step_key == "intro"


@pytest.mark.asyncio
async def test_pause_execution_with_reason() -> None:
    sequences, recorder = _resource(
        SequencesResource, {"status": "paused", "message": "Paused"}
    )
    await sequences.pause_execution("ex/1", "u1", reason="Prospect replied")
    await sequences.resume_execution("ex/1", "u1")

    pause, resume = recorder.requests
    assert pause.url.raw_path.startswith(b"/v1/sequences/executions/ex%2F1/pause")
    assert recorder.json_bodies() == [{"reason": "Prospect replied"}, {}]
    assert resume.url.path.endswith("/resume")


@pytest.mark.asyncio
async def test_list_executions_filters() -> None:
    sequences, recorder = _resource(
        SequencesResource, {"executions": [], "limit": 20, "offset": 0}
    )
    await sequences.list_executions(template_id="tpl1", status="paused", limit=20)
    assert dict(recorder.requests[0].url.params) == {
        "template_id": "tpl1",
        "status": "paused",
        "limit": "20",
    }


@pytest.mark.asyncio
async def test_bulk_approve_forces_approve_action() -> None:
    sequences, recorder = _resource(
        SequencesResource, {"approved": 2, "errors": []}
    )
    result = await sequences.bulk_approve(
        {"step_execution_ids": ["s1", "s2"], "action": "reject"}, "u1"
    )
    assert recorder.requests[0].url.path == "/v1/sequences/approvals/bulk"
    assert recorder.json_bodies()[0] == {
        "step_execution_ids": ["s1", "s2"],
        "action": "approve",
    }
    assert result.approved == 2


@pytest.mark.asyncio
async def test_list_templates_returns_models() -> None:
    stored = {
        **TEMPLATE,
        "id": "tpl1",
        "version": 3,
        "is_archived": True,
        "created_at": "2024-01-01",
        "updated_at": "2024-01-02",
    }
    sequences, recorder = _resource(SequencesResource, [stored])
    templates = await sequences.list_templates(include_archived=True)

    assert recorder.requests[0].url.params["include_archived"] == "true"
    assert [t.version for t in templates] == [3]
