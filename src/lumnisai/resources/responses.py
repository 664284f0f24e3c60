"""Responses resource: create, inspect and steer asynchronous responses."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import json
import math
import re
from typing import Any
from urllib.parse import urlsplit

from lumnisai.errors import LocalFileNotSupportedError, ValidationError
from lumnisai.models import (
    ArtifactsListResponse,
    CancelResponseResponse,
    CreateFeedbackRequest,
    CreateFeedbackResponse,
    CreateResponseRequest,
    CreateResponseResponse,
    FeedbackListResponse,
    Message,
    ResponseListResponse,
    ResponseObject,
    ResponseStatus,
)
from lumnisai.resources._base import Resource, parse_model, quote_segment

_ALLOWED_FILE_SCHEMES: frozenset[str] = frozenset(
    {"http", "https", "s3", "gs", "gcs", "file", "ftp", "ftps", "blob", "data"}
)
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*:", re.IGNORECASE)
_WINDOWS_DRIVE_RE = re.compile(r"^[a-z]:", re.IGNORECASE)
_CRITERION_TYPES: frozenset[str] = frozenset(
    {"universal", "varying", "validation_only"}
)


def _camel(snake: str) -> str:
    head, *rest = snake.split("_")
    return head + "".join(part.title() for part in rest)


def _param(obj: Mapping[str, Any], snake: str) -> Any:
    """Look a parameter up under its camelCase or snake_case spelling."""
    camel = _camel(snake)
    if camel in obj:
        return obj[camel]
    return obj.get(snake)


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_file_reference(uri: str) -> None:
    """Reject file references that point at the local filesystem.

    ``artifact_`` ids and URIs with a supported remote scheme pass; local
    paths (absolute, relative, Windows drive or UNC, bare file names) raise
    ``LocalFileNotSupportedError``.
    """
    if uri.startswith("artifact_"):
        return

    if _SCHEME_RE.match(uri):
        parts = urlsplit(uri)
        scheme = parts.scheme.lower()
        if scheme not in _ALLOWED_FILE_SCHEMES:
            raise LocalFileNotSupportedError(uri)
        if scheme in ("http", "https") and not parts.hostname:
            raise LocalFileNotSupportedError(uri)
        return

    is_local = (
        uri.startswith(("/", "./", "../", "\\\\"))
        or _WINDOWS_DRIVE_RE.match(uri) is not None
        or ("/" not in uri and "." in uri)
    )
    if is_local:
        raise LocalFileNotSupportedError(uri)


def _validate_criteria_definitions(definitions: Any) -> None:
    if not isinstance(definitions, list):
        raise ValidationError("criteria_definitions must be a list")
    if not definitions:
        raise ValidationError("criteria_definitions cannot be empty")

    criterion_ids: set[str] = set()
    column_names: set[str] = set()
    for index, criterion in enumerate(definitions):
        if not isinstance(criterion, Mapping):
            raise ValidationError(f"Criterion {index} must be an object")

        criterion_id = _param(criterion, "criterion_id")
        if not _non_empty_str(criterion_id):
            raise ValidationError(
                f"Criterion {index} criterion_id must be a non-empty string"
            )
        if criterion_id in criterion_ids:
            raise ValidationError(f"Duplicate criterion_id: {criterion_id}")
        criterion_ids.add(criterion_id)

        column_name = _param(criterion, "column_name")
        if not _non_empty_str(column_name):
            raise ValidationError(
                f"Criterion {index} column_name must be a non-empty string"
            )
        if column_name in column_names:
            raise ValidationError(f"Duplicate column_name: {column_name}")
        column_names.add(column_name)

        if not _non_empty_str(_param(criterion, "criterion_text")):
            raise ValidationError(
                f"Criterion {index} criterion_text must be a non-empty string"
            )

        criterion_type = _param(criterion, "criterion_type")
        if criterion_type not in _CRITERION_TYPES:
            raise ValidationError(
                f"Criterion {index} has invalid criterion_type: {criterion_type}"
            )

        weight = _param(criterion, "weight")
        try:
            weight_value = float(weight)
        except (TypeError, ValueError):
            weight_value = math.nan
        if isinstance(weight, (bool, str)) or not math.isfinite(weight_value):
            raise ValidationError(f"Criterion {index} weight must be a number")
        if weight_value <= 0:
            raise ValidationError(f"Criterion {index} weight must be positive")


def _validate_criteria_classification(classification: Any) -> None:
    if not isinstance(classification, Mapping):
        raise ValidationError("criteria_classification must be an object")
    for key in ("universal_criteria", "varying_criteria", "validation_only_criteria"):
        if not isinstance(_param(classification, key), list):
            raise ValidationError(
                f"criteria_classification missing or invalid {key}"
            )


def _validate_candidate_profiles(profiles: Any) -> None:
    if not isinstance(profiles, list) or not profiles:
        raise ValidationError(
            "candidate_profiles is required for people_scoring agent "
            "and must be a non-empty list"
        )

    missing: list[dict[str, Any]] = []
    for index, candidate in enumerate(profiles):
        candidate = candidate if isinstance(candidate, Mapping) else {}
        emails = candidate.get("emails")
        has_identifier = (
            _param(candidate, "linkedin_url")
            or candidate.get("email")
            or (isinstance(emails, list) and emails)
        )
        if not has_identifier:
            missing.append({"index": index, "name": candidate.get("name")})

    if missing:
        raise ValidationError(
            "Each candidate in candidate_profiles must include at least one "
            "identifier: linkedin_url or email. Missing identifiers for "
            f"{len(missing)} candidates: {json.dumps(missing)}"
        )


def validate_agent_params(
    params: Mapping[str, Any] | None, specialized_agent: str | None = None
) -> None:
    """Check specialized-agent parameters before they reach the server.

    Keys are accepted in either camelCase or snake_case.
    """
    if not params:
        return

    reuse_from = _param(params, "reuse_criteria_from")
    definitions = _param(params, "criteria_definitions")
    classification = _param(params, "criteria_classification")
    has_definitions = definitions is not None
    has_classification = classification is not None
    has_existing = bool(reuse_from) or (has_definitions and has_classification)

    if has_definitions != has_classification:
        raise ValidationError(
            "When providing criteria directly, both criteria_definitions and "
            "criteria_classification must be provided."
        )
    if has_definitions:
        _validate_criteria_definitions(definitions)
        _validate_criteria_classification(classification)

    run_single = _param(params, "run_single_criterion")
    if run_single:
        if not has_existing:
            raise ValidationError(
                "run_single_criterion requires reuse_criteria_from or explicit "
                "criteria_definitions/criteria_classification."
            )
        if not _non_empty_str(run_single):
            raise ValidationError("run_single_criterion must be a non-empty string")

    add_criterion = _param(params, "add_criterion")
    if add_criterion:
        if not has_existing:
            raise ValidationError(
                "add_criterion requires existing criteria (reuse or direct criteria)."
            )
        if not isinstance(add_criterion, Mapping):
            raise ValidationError("add_criterion must be an object")
        if not _non_empty_str(_param(add_criterion, "column_name")):
            raise ValidationError("add_criterion requires column_name")
        if not _non_empty_str(_param(add_criterion, "criterion_text")):
            raise ValidationError("add_criterion requires criterion_text")

    add_and_run = _param(params, "add_and_run_criterion")
    if add_and_run is not None:
        if not has_existing:
            raise ValidationError(
                "add_and_run_criterion requires existing criteria "
                "(reuse or direct criteria)."
            )
        if not _non_empty_str(add_and_run):
            raise ValidationError("add_and_run_criterion must be a non-empty string")

    if specialized_agent == "people_scoring":
        _validate_candidate_profiles(_param(params, "candidate_profiles"))


def _user_message(query: str) -> list[Message]:
    return [Message(role="user", content=query)]


class ResponsesResource(Resource):
    """Endpoints under ``/responses``."""

    async def create(
        self, request: CreateResponseRequest | Mapping[str, Any]
    ) -> CreateResponseResponse:
        """Create a response for asynchronous processing.

        Raises:
            LocalFileNotSupportedError: A file attachment is a local path.
            ValidationError: Specialized-agent parameters are inconsistent.
        """
        if not isinstance(request, CreateResponseRequest):
            request = CreateResponseRequest.model_validate(request)
        for attachment in request.files or ():
            validate_file_reference(attachment.uri)
        validate_agent_params(
            request.specialized_agent_params, request.specialized_agent
        )
        data = await self._http.post("/responses", request)
        return parse_model(CreateResponseResponse, data)

    async def get(
        self, response_id: str, *, wait: float | None = None
    ) -> ResponseObject:
        """Fetch a response; *wait* asks the server to long-poll (seconds)."""
        data = await self._http.get(
            f"/responses/{quote_segment(response_id)}", params={"wait": wait}
        )
        return parse_model(ResponseObject, data)

    async def list(
        self,
        *,
        user_id: str | None = None,
        status: ResponseStatus | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> ResponseListResponse:
        """List responses, optionally filtered."""
        params = {
            "user_id": user_id,
            "status": status,
            "start_date": start_date,
            "end_date": end_date,
            "limit": limit,
            "offset": offset,
        }
        data = await self._http.get("/responses", params=params)
        return parse_model(ResponseListResponse, data)

    async def cancel(self, response_id: str) -> CancelResponseResponse:
        """Cancel a queued or in-progress response."""
        data = await self._http.post(
            f"/responses/{quote_segment(response_id)}/cancel"
        )
        return parse_model(CancelResponseResponse, data)

    async def list_artifacts(
        self,
        response_id: str,
        *,
        limit: int | None = None,
        offset: int | None = None,
    ) -> ArtifactsListResponse:
        """List artifacts generated by a response."""
        data = await self._http.get(
            f"/responses/{quote_segment(response_id)}/artifacts",
            params={"limit": limit, "offset": offset},
        )
        return parse_model(ArtifactsListResponse, data)

    async def create_feedback(
        self,
        response_id: str,
        feedback: CreateFeedbackRequest | Mapping[str, Any],
    ) -> CreateFeedbackResponse:
        """Submit feedback to an active response."""
        if not isinstance(feedback, CreateFeedbackRequest):
            feedback = CreateFeedbackRequest.model_validate(feedback)
        data = await self._http.post(
            f"/responses/{quote_segment(response_id)}/feedback", feedback
        )
        return parse_model(CreateFeedbackResponse, data)

    async def list_feedback(
        self, response_id: str, *, progress_id: str | None = None
    ) -> FeedbackListResponse:
        """List consumed and unconsumed feedback for a response."""
        data = await self._http.get(
            f"/responses/{quote_segment(response_id)}/feedback",
            params={"progress_id": progress_id},
        )
        return parse_model(FeedbackListResponse, data)

    async def quick_people_search(
        self,
        query: str,
        *,
        limit: int | None = None,
        data_sources: Sequence[str] | None = None,
    ) -> CreateResponseResponse:
        """Run the ``quick_people_search`` specialized agent."""
        params: dict[str, Any] = {}
        if limit is not None:
            params["limit"] = limit
        if data_sources:
            params["data_sources"] = [str(getattr(s, "value", s)) for s in data_sources]
        return await self.create(
            CreateResponseRequest(
                messages=_user_message(query),
                specialized_agent="quick_people_search",
                specialized_agent_params=params or None,
            )
        )

    async def deep_people_search(
        self,
        query: str,
        *,
        requested_candidates: int | None = None,
        data_sources: Sequence[str] | None = None,
        reuse_criteria_from: str | None = None,
        criteria_definitions: list[dict[str, Any]] | None = None,
        criteria_classification: dict[str, Any] | None = None,
        run_single_criterion: str | None = None,
        add_criterion: dict[str, Any] | None = None,
        add_and_run_criterion: str | None = None,
        exclude_profiles: Sequence[str] | None = None,
        exclude_previously_contacted: bool | None = None,
        exclude_names: Sequence[str] | None = None,
    ) -> CreateResponseResponse:
        """Run the ``deep_people_search`` agent with generated or given criteria."""
        candidates = {
            "requested_candidates": requested_candidates,
            "data_sources": (
                [str(getattr(s, "value", s)) for s in data_sources]
                if data_sources
                else None
            ),
            "reuse_criteria_from": reuse_criteria_from,
            "criteria_definitions": criteria_definitions,
            "criteria_classification": criteria_classification,
            "run_single_criterion": run_single_criterion,
            "add_criterion": add_criterion,
            "add_and_run_criterion": add_and_run_criterion,
            "exclude_profiles": list(exclude_profiles) if exclude_profiles else None,
            "exclude_previously_contacted": exclude_previously_contacted,
            "exclude_names": list(exclude_names) if exclude_names else None,
        }
        params = {k: v for k, v in candidates.items() if v is not None}
        return await self.create(
            CreateResponseRequest(
                messages=_user_message(query),
                specialized_agent="deep_people_search",
                specialized_agent_params=params or None,
            )
        )

    async def people_scoring(
        self,
        query: str,
        candidate_profiles: list[dict[str, Any]],
        *,
        reuse_criteria_from: str | None = None,
        criteria_definitions: list[dict[str, Any]] | None = None,
        criteria_classification: dict[str, Any] | None = None,
        run_single_criterion: str | None = None,
        add_criterion: dict[str, Any] | None = None,
        add_and_run_criterion: str | None = None,
    ) -> CreateResponseResponse:
        """Score candidates; each needs a ``linkedin_url`` or an email."""
        extras = {
            "reuse_criteria_from": reuse_criteria_from,
            "criteria_definitions": criteria_definitions,
            "criteria_classification": criteria_classification,
            "run_single_criterion": run_single_criterion,
            "add_criterion": add_criterion,
            "add_and_run_criterion": add_and_run_criterion,
        }
        params: dict[str, Any] = {"candidate_profiles": candidate_profiles}
        params.update({k: v for k, v in extras.items() if v is not None})
        return await self.create(
            CreateResponseRequest(
                messages=_user_message(query),
                specialized_agent="people_scoring",
                specialized_agent_params=params,
            )
        )
