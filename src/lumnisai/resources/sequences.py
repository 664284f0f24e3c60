"""Sequences resource: automated multi-step outreach.

Templates define steps and the events that move a prospect between them;
executions are one prospect's run through a template. Mutating calls take
the acting ``user_id`` as a query parameter.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lumnisai.models import (
    ApprovalListResponse,
    ApprovalResponse,
    ApproveStepRequest,
    BatchPollRequest,
    BatchPollResponse,
    BulkApprovalRequest,
    BulkApprovalResponse,
    BulkCompleteRequest,
    BulkCompleteResponse,
    BulkOperationRequest,
    BulkOperationResponse,
    CompleteExecutionRequest,
    CompleteExecutionResponse,
    DuplicateTemplateRequest,
    ExecutionDetailResponse,
    ExecutionListResponse,
    ExecutionMetricsResponse,
    ExecutionStatus,
    LifecycleOperationRequest,
    LifecycleOperationResponse,
    RateLimitStatusResponse,
    RejectStepRequest,
    SequenceTemplateCreate,
    SequenceTemplateResponse,
    SequenceTemplateUpdate,
    SequenceValidationResponse,
    SkipStepRequest,
    SkipStepResponse,
    StartExecutionRequest,
    StartExecutionResponse,
)
from lumnisai.resources._base import Resource, parse_model, quote_segment


class SequencesResource(Resource):
    """Endpoints under ``/sequences``."""

    # =========================================================================
    # Templates
    # =========================================================================

    async def list_templates(
        self,
        *,
        use_case: str | None = None,
        include_system: bool | None = None,
        include_archived: bool | None = None,
    ) -> list[SequenceTemplateResponse]:
        params = {
            "use_case": use_case,
            "include_system": include_system,
            "include_archived": include_archived,
        }
        data = await self._http.get("/sequences/templates", params=params)
        return [parse_model(SequenceTemplateResponse, item) for item in data or []]

    async def get_template(self, template_id: str) -> SequenceTemplateResponse:
        """Fetch a template with all of its steps and transitions."""
        data = await self._http.get(
            f"/sequences/templates/{quote_segment(template_id)}"
        )
        return parse_model(SequenceTemplateResponse, data)

    async def create_template(
        self, template: SequenceTemplateCreate | Mapping[str, Any], user_id: str
    ) -> SequenceTemplateResponse:
        body = SequenceTemplateCreate.model_validate(template)
        data = await self._http.post(
            "/sequences/templates", body, params={"user_id": user_id}
        )
        return parse_model(SequenceTemplateResponse, data)

    async def update_template(
        self,
        template_id: str,
        template: SequenceTemplateUpdate | Mapping[str, Any],
        user_id: str,
    ) -> SequenceTemplateResponse:
        """Update a template.

        The server refuses step or transition changes while the template
        has active executions.
        """
        body = SequenceTemplateUpdate.model_validate(template)
        data = await self._http.put(
            f"/sequences/templates/{quote_segment(template_id)}",
            body,
            params={"user_id": user_id},
        )
        return parse_model(SequenceTemplateResponse, data)

    async def archive_template(self, template_id: str) -> None:
        """Archive (soft-delete) a template."""
        await self._http.delete(f"/sequences/templates/{quote_segment(template_id)}")

    async def duplicate_template(
        self,
        template_id: str,
        request: DuplicateTemplateRequest | Mapping[str, Any],
        user_id: str,
    ) -> SequenceTemplateResponse:
        """Copy a template under a new name with usage statistics reset."""
        body = DuplicateTemplateRequest.model_validate(request)
        data = await self._http.post(
            f"/sequences/templates/{quote_segment(template_id)}/duplicate",
            body,
            params={"user_id": user_id},
        )
        return parse_model(SequenceTemplateResponse, data)

    async def validate_template(
        self, template: SequenceTemplateCreate | Mapping[str, Any]
    ) -> SequenceValidationResponse:
        """Validate a template without saving it."""
        body = SequenceTemplateCreate.model_validate(template)
        data = await self._http.post("/sequences/templates/validate", body)
        return parse_model(SequenceValidationResponse, data)

    # =========================================================================
    # Executions
    # =========================================================================

    async def start_executions(
        self, request: StartExecutionRequest | Mapping[str, Any], user_id: str
    ) -> StartExecutionResponse:
        body = StartExecutionRequest.model_validate(request)
        data = await self._http.post(
            "/sequences/executions", body, params={"user_id": user_id}
        )
        return parse_model(StartExecutionResponse, data)

    async def list_executions(
        self,
        *,
        template_id: str | None = None,
        project_id: str | None = None,
        status: ExecutionStatus | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> ExecutionListResponse:
        params = {
            "template_id": template_id,
            "project_id": project_id,
            "status": status,
            "limit": limit,
            "offset": offset,
        }
        data = await self._http.get("/sequences/executions", params=params)
        return parse_model(ExecutionListResponse, data)

    async def get_execution_metrics(
        self, *, template_id: str | None = None, project_id: str | None = None
    ) -> ExecutionMetricsResponse:
        data = await self._http.get(
            "/sequences/executions/metrics",
            params={"template_id": template_id, "project_id": project_id},
        )
        return parse_model(ExecutionMetricsResponse, data)

    async def get_execution(self, execution_id: str) -> ExecutionDetailResponse:
        """Fetch an execution with its step history."""
        data = await self._http.get(
            f"/sequences/executions/{quote_segment(execution_id)}"
        )
        return parse_model(ExecutionDetailResponse, data)

    async def _lifecycle(
        self, execution_id: str, action: str, user_id: str, reason: str | None
    ) -> LifecycleOperationResponse:
        body = LifecycleOperationRequest(reason=reason)
        data = await self._http.post(
            f"/sequences/executions/{quote_segment(execution_id)}/{action}",
            body,
            params={"user_id": user_id},
        )
        return parse_model(LifecycleOperationResponse, data)

    async def pause_execution(
        self, execution_id: str, user_id: str, *, reason: str | None = None
    ) -> LifecycleOperationResponse:
        return await self._lifecycle(execution_id, "pause", user_id, reason)

    async def resume_execution(
        self, execution_id: str, user_id: str
    ) -> LifecycleOperationResponse:
        return await self._lifecycle(execution_id, "resume", user_id, None)

    async def stop_execution(
        self, execution_id: str, user_id: str, *, reason: str | None = None
    ) -> LifecycleOperationResponse:
        """Stop an execution permanently."""
        return await self._lifecycle(execution_id, "stop", user_id, reason)

    async def retry_execution(
        self, execution_id: str, user_id: str
    ) -> LifecycleOperationResponse:
        """Retry a failed execution."""
        return await self._lifecycle(execution_id, "retry", user_id, None)

    async def _bulk(
        self,
        action: str,
        request: BulkOperationRequest | Mapping[str, Any],
        user_id: str,
    ) -> BulkOperationResponse:
        body = BulkOperationRequest.model_validate(request)
        data = await self._http.post(
            f"/sequences/executions/bulk/{action}",
            body,
            params={"user_id": user_id},
        )
        return parse_model(BulkOperationResponse, data)

    async def bulk_pause_executions(
        self, request: BulkOperationRequest | Mapping[str, Any], user_id: str
    ) -> BulkOperationResponse:
        return await self._bulk("pause", request, user_id)

    async def bulk_resume_executions(
        self, request: BulkOperationRequest | Mapping[str, Any], user_id: str
    ) -> BulkOperationResponse:
        return await self._bulk("resume", request, user_id)

    async def bulk_stop_executions(
        self, request: BulkOperationRequest | Mapping[str, Any], user_id: str
    ) -> BulkOperationResponse:
        return await self._bulk("stop", request, user_id)

    async def complete_execution(
        self,
        execution_id: str,
        request: CompleteExecutionRequest | Mapping[str, Any],
        user_id: str,
    ) -> CompleteExecutionResponse:
        """Record an outcome and complete an execution."""
        body = CompleteExecutionRequest.model_validate(request)
        data = await self._http.post(
            f"/sequences/executions/{quote_segment(execution_id)}/complete",
            body,
            params={"user_id": user_id},
        )
        return parse_model(CompleteExecutionResponse, data)

    async def bulk_complete_executions(
        self, request: BulkCompleteRequest | Mapping[str, Any], user_id: str
    ) -> BulkCompleteResponse:
        body = BulkCompleteRequest.model_validate(request)
        data = await self._http.post(
            "/sequences/executions/bulk/complete",
            body,
            params={"user_id": user_id},
        )
        return parse_model(BulkCompleteResponse, data)

    async def get_rate_limit_status(self, user_id: str) -> RateLimitStatusResponse:
        data = await self._http.get(
            "/sequences/rate-limits/status", params={"user_id": user_id}
        )
        return parse_model(RateLimitStatusResponse, data)

    # =========================================================================
    # Approvals
    # =========================================================================

    async def list_pending_approvals(
        self,
        *,
        template_id: str | None = None,
        project_id: str | None = None,
        channel: str | None = None,
        action: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> ApprovalListResponse:
        """List steps waiting for approval."""
        params = {
            "template_id": template_id,
            "project_id": project_id,
            "channel": channel,
            "action": action,
            "limit": limit,
            "offset": offset,
        }
        data = await self._http.get("/sequences/approvals", params=params)
        return parse_model(ApprovalListResponse, data)

    async def approve_step(
        self,
        step_execution_id: str,
        user_id: str,
        request: ApproveStepRequest | Mapping[str, Any] | None = None,
    ) -> ApprovalResponse:
        body = ApproveStepRequest.model_validate(request or {})
        data = await self._http.post(
            f"/sequences/approvals/{quote_segment(step_execution_id)}/approve",
            body,
            params={"user_id": user_id},
        )
        return parse_model(ApprovalResponse, data)

    async def reject_step(
        self,
        step_execution_id: str,
        request: RejectStepRequest | Mapping[str, Any],
        user_id: str,
    ) -> ApprovalResponse:
        """Reject a step, which cancels its execution."""
        body = RejectStepRequest.model_validate(request)
        data = await self._http.post(
            f"/sequences/approvals/{quote_segment(step_execution_id)}/reject",
            body,
            params={"user_id": user_id},
        )
        return parse_model(ApprovalResponse, data)

    async def skip_step(
        self,
        step_execution_id: str,
        user_id: str,
        request: SkipStepRequest | Mapping[str, Any] | None = None,
    ) -> SkipStepResponse:
        """Skip a step and advance, completing the execution after the last one."""
        body = SkipStepRequest.model_validate(request or {})
        data = await self._http.post(
            f"/sequences/approvals/{quote_segment(step_execution_id)}/skip",
            body,
            params={"user_id": user_id},
        )
        return parse_model(SkipStepResponse, data)

    async def bulk_approval_action(
        self, request: BulkApprovalRequest | Mapping[str, Any], user_id: str
    ) -> BulkApprovalResponse:
        """Approve, reject or skip several steps; ``action`` defaults to approve."""
        body = BulkApprovalRequest.model_validate(request)
        data = await self._http.post(
            "/sequences/approvals/bulk", body, params={"user_id": user_id}
        )
        return parse_model(BulkApprovalResponse, data)

    async def bulk_approve(
        self, request: BulkApprovalRequest | Mapping[str, Any], user_id: str
    ) -> BulkApprovalResponse:
        body = BulkApprovalRequest.model_validate(request).model_copy(
            update={"action": "approve"}
        )
        return await self.bulk_approval_action(body, user_id)

    # =========================================================================
    # Batch polling
    # =========================================================================

    async def batch_poll(
        self, request: BatchPollRequest | Mapping[str, Any], user_id: str
    ) -> BatchPollResponse:
        """Answer up to 10 sequence queries in one round trip.

        Each query covers at most 20 project ids and 100 rows.
        """
        body = BatchPollRequest.model_validate(request)
        data = await self._http.post(
            "/sequences/poll", body, params={"user_id": user_id}
        )
        return parse_model(BatchPollResponse, data)
