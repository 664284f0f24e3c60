"""Messaging resource: conversation sync, sending, drafts and LinkedIn tools.

Every endpoint acts on behalf of one user, passed as the ``user_id`` query
parameter.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from lumnisai.errors import (
    MessagingNotFoundError,
    MessagingValidationError,
    NotFoundError,
    ValidationError,
)
from lumnisai.models import (
    BatchCheckConnectionRequest,
    BatchCheckPriorContactRequest,
    BatchCheckPriorContactResponse,
    BatchConnectionStatusResponse,
    BatchDraftRequest,
    BatchDraftResponse,
    BatchSendRequest,
    BatchSendResponse,
    CheckLinkedInConnectionRequest,
    CheckPriorContactRequest,
    CheckPriorContactResponse,
    ConversationDetail,
    ConversationSummary,
    CreateDraftRequest,
    DeleteConversationResponse,
    DeleteConversationsByProjectResponse,
    DraftResponse,
    EmailThreadSummary,
    LinkedInConnectionStatus,
    LinkedInCreditsResponse,
    LinkedInSendRequest,
    NetworkDistance,
    SendMessageRequest,
    SendMessageResponse,
    SendReplyRequest,
    SendResult,
    SuccessResponse,
    SyncJobResponse,
    SyncProspectRequest,
    SyncProspectResponse,
    SyncRequest,
    UnlinkConversationsResponse,
    UpdateLinkedInSubscriptionRequest,
)
from lumnisai.resources._base import Resource, parse_model, quote_segment

logger = logging.getLogger(__name__)


class MessagingResource(Resource):
    """Endpoints under ``/messaging``."""

    # =========================================================================
    # Sync
    # =========================================================================

    async def sync_conversations(
        self, user_id: str, request: SyncRequest | Mapping[str, Any]
    ) -> SyncJobResponse:
        """Start syncing conversations for specific prospects.

        Raises:
            MessagingValidationError: No prospects, or a prospect without an
                email, LinkedIn URL or provider id.
        """
        body = SyncRequest.model_validate(request)
        if not body.prospects:
            raise MessagingValidationError(
                "prospects array is required and must not be empty"
            )
        for prospect in body.prospects:
            if not prospect.has_identifier:
                raise MessagingValidationError(
                    "Each prospect must have at least one identifier "
                    "(email, linkedin_url, or provider_id)"
                )
        data = await self._http.post(
            "/messaging/sync", body, params={"user_id": user_id}
        )
        return parse_model(SyncJobResponse, data)

    async def sync_prospect(
        self, user_id: str, request: SyncProspectRequest | Mapping[str, Any]
    ) -> SyncProspectResponse:
        """Sync the conversation of a single prospect on demand."""
        body = SyncProspectRequest.model_validate(request)
        data = await self._http.post(
            "/messaging/sync/prospect", body, params={"user_id": user_id}
        )
        return parse_model(SyncProspectResponse, data)

    async def get_sync_status(self, job_id: str) -> SyncJobResponse:
        data = await self._http.get(f"/messaging/sync/{quote_segment(job_id)}")
        return parse_model(SyncJobResponse, data)

    # =========================================================================
    # Conversations
    # =========================================================================

    async def list_conversations(
        self,
        user_id: str,
        *,
        status: str | None = None,
        channel: str | None = None,
        project_id: str | None = None,
        network_distance: NetworkDistance | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[ConversationSummary]:
        """List the user's conversations, optionally filtered."""
        params = {
            "user_id": user_id,
            "status": status,
            "channel": channel,
            "project_id": project_id,
            "network_distance": network_distance,
            "limit": limit,
            "offset": offset,
        }
        data = await self._http.get("/messaging/conversations", params=params)
        return [parse_model(ConversationSummary, item) for item in data or []]

    async def list_conversations_by_project(
        self,
        project_id: str,
        user_id: str,
        *,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[ConversationSummary]:
        params = {"user_id": user_id, "limit": limit, "offset": offset}
        data = await self._http.get(
            f"/messaging/conversations/by-project/{quote_segment(project_id)}",
            params=params,
        )
        return [parse_model(ConversationSummary, item) for item in data or []]

    async def get_conversation(
        self, conversation_id: str, user_id: str, *, fetch_live: bool | None = None
    ) -> ConversationDetail:
        """Fetch a conversation with its messages.

        ``fetch_live=True`` asks the server to refresh from the provider
        instead of returning stored messages.
        """
        data = await self._http.get(
            f"/messaging/conversations/{quote_segment(conversation_id)}",
            params={"user_id": user_id, "fetch_live": fetch_live},
        )
        return parse_model(ConversationDetail, data)

    async def send_message(
        self, user_id: str, request: SendMessageRequest | Mapping[str, Any]
    ) -> SendMessageResponse:
        """Send a message, starting a conversation or adding to one."""
        body = SendMessageRequest.model_validate(request)
        data = await self._http.post(
            "/messaging/send", body, params={"user_id": user_id}
        )
        return parse_model(SendMessageResponse, data)

    async def reply_to_conversation(
        self,
        conversation_id: str,
        user_id: str,
        request: SendReplyRequest | Mapping[str, Any],
    ) -> SendResult:
        body = SendReplyRequest.model_validate(request)
        data = await self._http.post(
            f"/messaging/conversations/{quote_segment(conversation_id)}/reply",
            body,
            params={"user_id": user_id},
        )
        return parse_model(SendResult, data)

    async def get_email_threads(
        self, email_address: str, user_id: str, *, limit: int | None = None
    ) -> list[EmailThreadSummary]:
        """List every email thread with *email_address*."""
        data = await self._http.get(
            f"/messaging/email-threads/{quote_segment(email_address)}",
            params={"user_id": user_id, "limit": limit},
        )
        return [parse_model(EmailThreadSummary, item) for item in data or []]

    async def delete_conversation(
        self, conversation_id: str, user_id: str
    ) -> DeleteConversationResponse:
        """Delete a conversation and all of its messages.

        Raises:
            MessagingNotFoundError: The conversation does not exist.
            MessagingValidationError: The conversation id was rejected.
        """
        try:
            data = await self._http.delete(
                f"/messaging/conversations/{quote_segment(conversation_id)}",
                params={"user_id": user_id},
            )
        except NotFoundError as exc:
            raise MessagingNotFoundError(
                f"Conversation {conversation_id} not found",
                code="CONVERSATION_NOT_FOUND",
                status_code=exc.status_code,
                details=exc.details,
                request_id=exc.request_id,
            ) from exc
        except ValidationError as exc:
            raise MessagingValidationError(
                f"Invalid conversation ID: {conversation_id}",
                status_code=exc.status_code,
                details=exc.details,
                request_id=exc.request_id,
            ) from exc
        return parse_model(DeleteConversationResponse, data)

    async def delete_conversations_by_project(
        self, project_id: str, user_id: str
    ) -> DeleteConversationsByProjectResponse:
        """Permanently delete every conversation of a project.

        ``unlink_conversations_from_project`` keeps the history instead.
        """
        logger.warning("Deleting all conversations of project %s", project_id)
        data = await self._http.delete(
            "/messaging/conversations",
            params={"project_id": project_id, "user_id": user_id},
        )
        return parse_model(DeleteConversationsByProjectResponse, data)

    async def unlink_conversations_from_project(
        self, project_id: str, user_id: str
    ) -> UnlinkConversationsResponse:
        """Detach a project's conversations without deleting them."""
        data = await self._http.post(
            "/messaging/conversations/unlink-project",
            params={"project_id": project_id, "user_id": user_id},
        )
        return parse_model(UnlinkConversationsResponse, data)

    # =========================================================================
    # LinkedIn
    # =========================================================================

    async def check_linkedin_connection(
        self,
        user_id: str,
        request: CheckLinkedInConnectionRequest | Mapping[str, Any],
    ) -> LinkedInConnectionStatus:
        body = CheckLinkedInConnectionRequest.model_validate(request)
        data = await self._http.post(
            "/messaging/linkedin/check-connection",
            body,
            params={"user_id": user_id},
        )
        return parse_model(LinkedInConnectionStatus, data)

    async def batch_check_linkedin_connections(
        self,
        user_id: str,
        request: BatchCheckConnectionRequest | Mapping[str, Any],
    ) -> BatchConnectionStatusResponse:
        body = BatchCheckConnectionRequest.model_validate(request)
        data = await self._http.post(
            "/messaging/linkedin/check-connections/batch",
            body,
            params={"user_id": user_id},
        )
        return parse_model(BatchConnectionStatusResponse, data)

    async def send_linkedin_outreach(
        self, user_id: str, request: LinkedInSendRequest | Mapping[str, Any]
    ) -> SendResult:
        """Send LinkedIn outreach; the server picks message, request or InMail."""
        body = LinkedInSendRequest.model_validate(request)
        data = await self._http.post(
            "/messaging/linkedin/send", body, params={"user_id": user_id}
        )
        return parse_model(SendResult, data)

    async def get_linkedin_credits(
        self, user_id: str, *, force_refresh: bool = False
    ) -> LinkedInCreditsResponse:
        """Return InMail credits, cached unless *force_refresh* is set."""
        params = {"user_id": user_id, "force_refresh": True if force_refresh else None}
        data = await self._http.get("/messaging/linkedin/credits", params=params)
        return parse_model(LinkedInCreditsResponse, data)

    async def refresh_linkedin_credits(self, user_id: str) -> LinkedInCreditsResponse:
        """Fetch the real-time credit balance and update the cache."""
        data = await self._http.post(
            "/messaging/linkedin/refresh-credits", params={"user_id": user_id}
        )
        return parse_model(LinkedInCreditsResponse, data)

    async def update_linkedin_subscription(
        self,
        user_id: str,
        request: UpdateLinkedInSubscriptionRequest | Mapping[str, Any],
    ) -> SuccessResponse:
        body = UpdateLinkedInSubscriptionRequest.model_validate(request)
        data = await self._http.put(
            "/messaging/linkedin/subscription", body, params={"user_id": user_id}
        )
        return parse_model(SuccessResponse, data)

    # =========================================================================
    # Drafts
    # =========================================================================

    async def create_draft(
        self, user_id: str, request: CreateDraftRequest | Mapping[str, Any]
    ) -> DraftResponse:
        body = CreateDraftRequest.model_validate(request)
        data = await self._http.post(
            "/messaging/drafts", body, params={"user_id": user_id}
        )
        return parse_model(DraftResponse, data)

    async def create_batch_drafts(
        self, user_id: str, request: BatchDraftRequest | Mapping[str, Any]
    ) -> BatchDraftResponse:
        """Create drafts for many prospects, optionally AI-generated."""
        body = BatchDraftRequest.model_validate(request)
        data = await self._http.post(
            "/messaging/drafts/batch", body, params={"user_id": user_id}
        )
        return parse_model(BatchDraftResponse, data)

    async def send_draft(self, draft_id: str, user_id: str) -> SendResult:
        """Approve and send one draft."""
        data = await self._http.post(
            f"/messaging/drafts/{quote_segment(draft_id)}/send",
            params={"user_id": user_id},
        )
        return parse_model(SendResult, data)

    async def send_batch_drafts(
        self, user_id: str, request: BatchSendRequest | Mapping[str, Any]
    ) -> BatchSendResponse:
        """Send several drafts; rate-limited items are queued server-side."""
        body = BatchSendRequest.model_validate(request)
        data = await self._http.post(
            "/messaging/drafts/batch/send", body, params={"user_id": user_id}
        )
        return parse_model(BatchSendResponse, data)

    # =========================================================================
    # Prior contact
    # =========================================================================

    async def check_prior_contact(
        self, user_id: str, request: CheckPriorContactRequest | Mapping[str, Any]
    ) -> CheckPriorContactResponse:
        """Search the user's connected accounts for earlier contact with a person.

        With no ``channels``, an email is checked on Gmail and Outlook and a
        LinkedIn URL or provider id on LinkedIn. Results are cached
        server-side; ``skip_cache=True`` forces a fresh check.

        Raises:
            MessagingValidationError: None of email, LinkedIn URL or provider
                id was given.
        """
        body = CheckPriorContactRequest.model_validate(request)
        if not body.has_identifier:
            raise MessagingValidationError(
                "At least one of email, linkedin_url, or provider_id must be provided"
            )
        data = await self._http.post(
            "/messaging/check-prior-contact", body, params={"user_id": user_id}
        )
        return parse_model(CheckPriorContactResponse, data)

    async def batch_check_prior_contact(
        self,
        user_id: str,
        request: BatchCheckPriorContactRequest | Mapping[str, Any],
    ) -> BatchCheckPriorContactResponse:
        """Check prior contact for many prospects; results keyed by prospect id.

        Raises:
            MessagingValidationError: A prospect has no identifier.
        """
        body = BatchCheckPriorContactRequest.model_validate(request)
        for prospect in body.prospects:
            if not prospect.has_identifier:
                raise MessagingValidationError(
                    f"Prospect '{prospect.prospect_id}' must have at least one of: "
                    "email, linkedin_url, or provider_id"
                )
        data = await self._http.post(
            "/messaging/check-prior-contact/batch",
            body,
            params={"user_id": user_id},
        )
        return parse_model(BatchCheckPriorContactResponse, data)
