"""Wire record types.

Models parse the camel-cased payloads produced by the transport (via the
``camelize_key`` alias generator) and expose snake_case attributes. Unknown
fields are kept so newer server payloads never fail validation.
"""

from __future__ import annotations

import enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lumnisai.casing import camelize_key

ResponseStatus = Literal["queued", "in_progress", "succeeded", "failed", "cancelled"]
TERMINAL_STATUSES: frozenset[str] = frozenset({"succeeded", "failed", "cancelled"})

Scope = Literal["user", "tenant"]


class WireModel(BaseModel):
    """Base for every payload exchanged with the API."""

    model_config = ConfigDict(
        alias_generator=camelize_key,
        populate_by_name=True,
        extra="allow",
    )


# =============================================================================
# Responses
# =============================================================================


class Message(WireModel):
    """A conversational message."""

    role: Literal["system", "user", "assistant"]
    content: str


class FileAttachment(WireModel):
    """A remote file referenced by a response request."""

    name: str
    uri: str
    mime_type: str | None = None
    size_bytes: int | None = None


class AgentConfig(WireModel):
    """Agent model and feature selection."""

    planner_model_type: str | None = None
    coordinator_model_type: str | None = None
    orchestrator_model_type: str | None = None
    planner_model_name: str | None = None
    coordinator_model_name: str | None = None
    orchestrator_model_name: str | None = None
    final_response_model_name: str | None = None
    fast_model_name: str | None = None
    use_cognitive_tools: bool | None = None
    enable_task_validation: bool | None = None
    generate_comprehensive_output: bool | None = None
    skill_ids: list[str] | None = None


class CreateResponseRequest(WireModel):
    """Body of ``POST /responses``."""

    messages: list[Message]
    thread_id: str | None = None
    files: list[FileAttachment] | None = None
    options: dict[str, Any] | None = None
    user_id: str | None = None
    agent_config: AgentConfig | None = None
    response_format: dict[str, Any] | None = None
    response_format_instructions: str | None = None
    model_overrides: dict[str, str] | None = None
    #: Known agents: ``quick_people_search``, ``deep_people_search``,
    #: ``people_scoring``; any string is accepted.
    specialized_agent: str | None = None
    specialized_agent_params: dict[str, Any] | None = None


class CreateResponseResponse(WireModel):
    """Acknowledgement of a created response."""

    response_id: str
    thread_id: str | None = None
    status: ResponseStatus = "queued"
    tenant_id: str | None = None
    created_at: str | None = None


class ProgressEntry(WireModel):
    """One entry of a response's append-only activity log."""

    model_config = ConfigDict(frozen=True)

    ts: str | None = None
    state: str
    message: str
    tool_calls: list[dict[str, Any]] | None = None
    output_text: str | None = None


class ResponseArtifact(WireModel):
    """Inline artifact attached to a response."""

    type: str
    content: str
    language: str | None = None


class ResponseObject(WireModel):
    """Current state of an asynchronous response."""

    status: ResponseStatus
    response_id: str | None = None
    thread_id: str | None = None
    tenant_id: str | None = None
    user_id: str | None = None
    progress: list[ProgressEntry] = Field(default_factory=list)
    input_messages: list[Message] = Field(default_factory=list)
    output_text: str | None = None
    content: str | None = None
    response_title: str | None = None
    structured_response: dict[str, Any] | None = None
    artifacts: list[ResponseArtifact] | None = None
    created_at: str | None = None
    completed_at: str | None = None
    error: dict[str, Any] | None = None
    options: dict[str, Any] | None = None

    @field_validator("progress", "input_messages", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_terminal(self) -> bool:
        """Whether no further status transitions can occur."""
        return self.status in TERMINAL_STATUSES


class CancelResponseResponse(WireModel):
    """Result of a cancellation request."""

    status: str
    message: str


class ArtifactObject(WireModel):
    """A stored artifact produced by a response."""

    artifact_id: str
    response_id: str
    name: str
    uri: str
    mime_type: str
    bytes: int
    created_at: str


class ArtifactsListResponse(WireModel):
    """A page of artifacts."""

    artifacts: list[ArtifactObject] = Field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0


class ResponseListResponse(WireModel):
    """A page of responses."""

    responses: list[ResponseObject] = Field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0


FeedbackType = Literal["suggestion", "correction", "guidance"]


class CreateFeedbackRequest(WireModel):
    """Feedback submitted to an active response."""

    feedback_text: str
    feedback_type: FeedbackType | None = None
    user_id: str | None = None
    progress_id: str | None = None
    tool_call_id: str | None = None
    tool_args_update: dict[str, Any] | None = None


class CreateFeedbackResponse(WireModel):
    """Acknowledgement of submitted feedback."""

    feedback_id: str
    created_at: str


class FeedbackObject(WireModel):
    """Stored feedback for a response."""

    feedback_id: str
    response_id: str
    tenant_id: str
    feedback_text: str
    feedback_type: FeedbackType
    is_consumed: bool
    created_at: str
    user_id: str | None = None
    progress_id: str | None = None
    tool_call_id: str | None = None
    tool_args_update: dict[str, Any] | None = None
    consumed_at: str | None = None


class FeedbackListResponse(WireModel):
    """All feedback for a response."""

    response_id: str
    total_feedback: int
    consumed_count: int
    unconsumed_count: int
    feedback: list[FeedbackObject] = Field(default_factory=list)
    note: str = ""
    progress_id_filter: str | None = None


# =============================================================================
# Threads, users, tenant
# =============================================================================


class ThreadObject(WireModel):
    """A conversation thread."""

    thread_id: str
    tenant_id: str
    created_at: str
    response_count: int = 0
    user_id: str | None = None
    title: str | None = None
    updated_at: str | None = None
    last_response_at: str | None = None


class ThreadListResponse(WireModel):
    """A page of threads."""

    threads: list[ThreadObject] = Field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0


class PaginationInfo(WireModel):
    """Page-number pagination metadata."""

    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class UserResponse(WireModel):
    """A tenant user."""

    id: str
    email: str
    tenant_id: str
    created_at: str
    updated_at: str
    first_name: str | None = None
    last_name: str | None = None


class UserListResponse(WireModel):
    """A page of users."""

    users: list[UserResponse]
    pagination: PaginationInfo


class UserDeleteResponse(WireModel):
    """Result of deactivating a user."""

    message: str


class TenantDetailsResponse(WireModel):
    """Tenant account details."""

    id: str
    name: str
    developer_id: str
    developer_email: str
    plan: str
    db_status: Literal["provisioning", "active", "suspended", "failed"]
    billing_status: Literal["trial", "active", "past_due", "canceled"]
    api_key_mode: Literal["platform", "byo_keys"]
    created_at: str
    updated_at: str


# =============================================================================
# Skills
# =============================================================================


class SkillGuidelineCreate(WireModel):
    """A new skill guideline."""

    name: str
    description: str
    content: str
    version: str
    category: str | None = None


class SkillGuidelineUpdate(WireModel):
    """Partial update of a skill guideline."""

    name: str | None = None
    description: str | None = None
    content: str | None = None
    category: str | None = None
    version: str | None = None
    is_active: bool | None = None


class SkillGuidelineResponse(SkillGuidelineCreate):
    """A stored skill guideline."""

    id: str
    is_active: bool
    created_at: str
    updated_at: str
    tenant_id: str | None = None
    user_id: str | None = None


class SkillGuidelineListResponse(WireModel):
    """A page of skill guidelines."""

    skills: list[SkillGuidelineResponse] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 0


ExecutionOutcome = Literal["success", "partial", "failed", "cancelled", "not_executed"]


class SkillUsageCreate(WireModel):
    """A skill usage record."""

    response_id: str
    skill_id: str
    skill_name: str
    tenant_id: str
    user_id: str | None = None
    relevance_score: float | None = None


class SkillUsageUpdate(WireModel):
    """Partial update of a skill usage record."""

    planner_selected: bool | None = None
    usage_reasoning: str | None = None
    priority: int | None = None
    execution_outcome: ExecutionOutcome | None = None
    effectiveness_score: float | None = None
    feedback_notes: str | None = None


class SkillUsageResponse(WireModel):
    """A stored skill usage record."""

    id: str
    response_id: str
    skill_id: str
    skill_name: str
    tenant_id: str
    planner_selected: bool
    created_at: str
    updated_at: str
    user_id: str | None = None
    relevance_score: float | None = None
    retrieved_at: str | None = None
    usage_reasoning: str | None = None
    priority: int | None = None
    selected_at: str | None = None
    execution_outcome: str | None = None
    effectiveness_score: float | None = None
    feedback_notes: str | None = None
    executed_at: str | None = None


class SkillUsageListResponse(WireModel):
    """A page of skill usage records."""

    usages: list[SkillUsageResponse] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 0


class SkillEffectivenessMetrics(WireModel):
    """Aggregated effectiveness of a skill."""

    total_retrievals: int
    total_selections: int
    successful_executions: int
    selection_rate: float
    success_rate: float
    avg_effectiveness: float
    usage_frequency: float
    skill_id: str | None = None


# =============================================================================
# People
# =============================================================================


class PeopleDataSource(str, enum.Enum):
    """People search data providers."""

    PDL = "PDL"
    CORESIGNAL = "CORESIGNAL"
    CRUST_DATA = "CRUST_DATA"


class PersonResult(WireModel):
    """A normalized person returned by people search."""

    id: str
    name: str
    source: str
    emails: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    is_decision_maker: bool = False
    recently_changed_jobs: bool = False
    current_title: str | None = None
    current_company: str | None = None
    current_department: str | None = None
    location: str | None = None
    city: str | None = None
    country: str | None = None
    email: str | None = None
    linkedin_url: str | None = None
    profile_picture_url: str | None = None
    years_experience: float | None = None
    seniority_level: str | None = None
    connections_count: int | None = None
    confidence_score: float | None = None
    salary_range: dict[str, Any] | None = None
    certifications_count: int | None = None
    languages: list[str] | None = None
    education_degrees: list[str] | None = None


class PeopleSearchResponse(WireModel):
    """Result of a quick people search."""

    candidates: list[PersonResult] = Field(default_factory=list)
    total_found: int = 0
    applied_filters: dict[str, Any] = Field(default_factory=dict)
    execution_time_ms: float = 0
    data_sources_used: list[str] = Field(default_factory=list)


class PostPreview(WireModel):
    """Engagement metadata of one LinkedIn post."""

    url: str
    status: str
    author_name: str | None = None
    total_reactions: int | None = None
    total_comments: int | None = None
    error: str | None = None


class PostPreviewResponse(WireModel):
    """Result of a posts preview request."""

    posts: list[PostPreview] = Field(default_factory=list)


# =============================================================================
# Webhooks
# =============================================================================

WebhookEvent = Literal["message.sent", "message.received", "connection.accepted"]


class WebhookPayload(WireModel):
    """Envelope of a messaging webhook delivery."""

    event: WebhookEvent
    data: dict[str, Any]
    timestamp: str


# =============================================================================
# Messaging
# =============================================================================

ChannelType = Literal["gmail", "outlook", "linkedin"]
NetworkDistance = Literal[
    "FIRST_DEGREE", "SECOND_DEGREE", "THIRD_DEGREE", "OUT_OF_NETWORK"
]
InmailSubscription = Literal[
    "sales_navigator", "recruiter_lite", "recruiter_corporate", "premium"
]
OutreachMethod = Literal[
    "connection_request", "direct_message", "inmail", "inmail_escalation", "email"
]


class ProspectIdentifier(WireModel):
    """Ways of locating a prospect across channels."""

    email: str | None = None
    linkedin_url: str | None = None
    provider_id: str | None = None

    @property
    def has_identifier(self) -> bool:
        """Whether at least one identifier is set."""
        return bool(self.email or self.linkedin_url or self.provider_id)


class ProspectSyncIdentifier(ProspectIdentifier):
    """A prospect whose conversations should be synced."""

    prospect_id: str | None = None


class SyncRequest(WireModel):
    """Body of ``POST /messaging/sync``."""

    prospects: list[ProspectSyncIdentifier] = Field(default_factory=list)
    channels: list[str] | None = None


class SyncProspectRequest(ProspectIdentifier):
    """Body of ``POST /messaging/sync/prospect``."""

    channel: str | None = None


class SyncStats(WireModel):
    """Counters of a sync job."""

    synced: int = 0
    created: int = 0
    updated: int = 0
    errors: int = 0
    prospects_requested: int | None = None
    prospects_found: int | None = None


class SyncJobResponse(WireModel):
    """State of a conversation sync job."""

    job_id: str
    status: str
    started_at: str | None = None
    completed_at: str | None = None
    stats: SyncStats | None = None
    error: str | None = None


class ConversationSummary(WireModel):
    """A conversation with one prospect on one channel."""

    id: str
    channel: str
    status: str
    prospect_name: str
    message_count: int = 0
    outreach_method: str | None = None
    prospect_email: str | None = None
    prospect_company: str | None = None
    prospect_title: str | None = None
    last_message_at: str | None = None
    last_message_preview: str | None = None
    ai_suggested_response: str | None = None
    is_linkedin_connected: bool | None = None
    network_distance: NetworkDistance | None = None
    connection_request_sent_at: str | None = None
    connection_accepted_at: str | None = None
    escalation_scheduled_for: str | None = None
    prospect_external_id: str | None = None
    project_id: str | None = None


class ProspectSyncResult(WireModel):
    """Outcome of syncing one prospect."""

    status: str
    messages_synced: int = 0
    prospect_id: str | None = None
    email: str | None = None
    linkedin_url: str | None = None
    conversation_id: str | None = None
    error: str | None = None


class SyncProspectResponse(WireModel):
    """Result of an on-demand prospect sync."""

    result: ProspectSyncResult
    conversation: ConversationSummary | None = None


class ConversationMessage(WireModel):
    """One message of a conversation."""

    id: str
    direction: str
    content: str
    sender_name: str
    sent_at: str
    message_type: str | None = None
    subject: str | None = None
    ai_generated: bool = False


class ConversationDetail(WireModel):
    """A conversation and its messages."""

    conversation: ConversationSummary
    messages: list[ConversationMessage] = Field(default_factory=list)


class SendMessageRequest(WireModel):
    """Body of ``POST /messaging/send``."""

    channel: str
    recipient_id: str
    content: str
    conversation_id: str | None = None
    subject: str | None = None
    recipient_name: str | None = None
    project_id: str | None = None
    prospect_external_id: str | None = None
    organization_id: str | None = None


class SendMessageResponse(WireModel):
    """Result of sending a message."""

    success: bool
    message_id: str | None = None
    conversation_id: str | None = None
    external_id: str | None = None


class SendReplyRequest(WireModel):
    """Body of a conversation reply."""

    content: str
    organization_id: str | None = None


class SendResult(WireModel):
    """Outcome of one send, sent immediately or queued."""

    success: bool
    draft_id: str | None = None
    conversation_id: str | None = None
    message_id: str | None = None
    outreach_method: str | None = None
    queued: bool | None = None
    is_free_inmail: bool | None = None
    error: str | None = None
    error_code: str | None = None
    prospect_external_id: str | None = None


class EmailThreadSummary(WireModel):
    """An email thread with one address."""

    thread_id: str
    last_message_at: str
    message_count: int
    is_lumnis_initiated: bool
    subject: str | None = None
    preview: str | None = None


class CheckLinkedInConnectionRequest(WireModel):
    """Body of a LinkedIn connection check."""

    linkedin_url: str | None = None
    provider_id: str | None = None


class LinkedInConnectionStatus(WireModel):
    """Whether the user is connected to a prospect on LinkedIn."""

    connected: bool
    can_message: bool
    can_inmail: bool
    provider_id: str | None = None
    chat_id: str | None = None
    is_open_profile: bool = False
    network_distance: NetworkDistance | None = None


class ProspectConnectionCheck(WireModel):
    """A prospect in a batch connection check."""

    prospect_id: str
    linkedin_url: str | None = None
    provider_id: str | None = None


class BatchCheckConnectionRequest(WireModel):
    """Body of a batch LinkedIn connection check."""

    prospects: list[ProspectConnectionCheck]


class ConnectionSummary(WireModel):
    """Counts of a batch connection check."""

    total: int
    connected: int
    not_connected: int


class BatchConnectionStatusResponse(WireModel):
    """Connection status per prospect id."""

    results: dict[str, LinkedInConnectionStatus] = Field(default_factory=dict)
    summary: ConnectionSummary


class LinkedInSendRequest(WireModel):
    """Body of ``POST /messaging/linkedin/send``."""

    prospect_name: str
    content: str
    prospect_provider_id: str | None = None
    prospect_linkedin_url: str | None = None
    is_priority: bool | None = None
    enable_escalation: bool | None = None
    escalation_days: int | None = Field(default=None, ge=1, le=30)
    project_id: str | None = None
    prospect_external_id: str | None = None
    organization_id: str | None = None


class LinkedInSubscriptionInfo(WireModel):
    """One LinkedIn subscription and its InMail credit pool."""

    type: str
    feature: str
    monthly_allowance: int
    max_accumulation: int
    is_active: bool
    inmail_credits_remaining: int | None = None
    inmail_credits_updated_at: str | None = None


class LinkedInCreditsResponse(WireModel):
    """InMail credits across the account's subscriptions."""

    subscriptions: list[LinkedInSubscriptionInfo] = Field(default_factory=list)
    is_real_time: bool = False
    can_send_inmail: bool = False
    subscription_type: str | None = None
    credits_remaining: int | None = None
    credits_updated_at: str | None = None


class UpdateLinkedInSubscriptionRequest(WireModel):
    """Body of ``PUT /messaging/linkedin/subscription``."""

    subscription_type: str
    inmail_credits: int | None = None


class SuccessResponse(WireModel):
    """Bare acknowledgement."""

    success: bool


class CreateDraftRequest(WireModel):
    """Body of ``POST /messaging/drafts``."""

    channel: str
    content: str
    recipient_email: str | None = None
    recipient_linkedin_url: str | None = None
    recipient_provider_id: str | None = None
    recipient_name: str | None = None
    conversation_id: str | None = None
    project_id: str | None = None
    prospect_external_id: str | None = None
    subject: str | None = None
    is_priority: bool = False
    outreach_method: str | None = None
    organization_id: str | None = None
    inmail_subscription: InmailSubscription | None = None


class DraftResponse(WireModel):
    """A stored draft message."""

    id: str
    status: str
    content: str
    created_at: str
    prospect_external_id: str | None = None
    conversation_id: str | None = None
    outreach_method: OutreachMethod | None = None
    subject: str | None = None
    scheduled_for: str | None = None
    error_message: str | None = None
    inmail_subscription: InmailSubscription | None = None


class ProspectInfo(WireModel):
    """A prospect in a batch draft request."""

    external_id: str
    name: str
    email: str | None = None
    linkedin_url: str | None = None
    provider_id: str | None = None
    current_title: str | None = None
    current_company: str | None = None
    is_priority: bool = False
    selected_channel: str | None = None
    outreach_method: OutreachMethod | None = None
    is_connected: bool | None = None
    use_prior_contact: bool | None = None
    ai_context: dict[str, Any] | None = None
    priority: int | None = Field(default=None, ge=0, le=10)
    inmail_subscription: InmailSubscription | None = None


class BatchDraftRequest(WireModel):
    """Body of ``POST /messaging/drafts/batch``."""

    prospects: list[ProspectInfo]
    project_id: str
    channel: str
    subject_template: str | None = None
    content_template: str | None = None
    use_ai_generation: bool | None = None
    use_prior_contact: bool | None = None
    ai_context: dict[str, Any] | None = None
    organization_id: str | None = None


class BatchDraftResponse(WireModel):
    """Drafts created for a batch of prospects."""

    drafts: list[DraftResponse] = Field(default_factory=list)
    created: int = 0
    errors: int = 0
    error_details: list[dict[str, Any]] | None = None


class DraftSendOverride(WireModel):
    """Per-draft adjustments applied before a batch send."""

    draft_id: str
    skip_note: bool | None = None
    outreach_method: OutreachMethod | None = None
    inmail_subscription: InmailSubscription | None = None


class BatchSendRequest(WireModel):
    """Body of ``POST /messaging/drafts/batch/send``."""

    draft_ids: list[str]
    send_rate_per_day: int | None = Field(default=None, ge=1, le=100)
    priority: int | None = Field(default=None, ge=0, le=10)
    draft_overrides: list[DraftSendOverride] | None = None


class BatchSendResponse(WireModel):
    """Outcome of a batch send."""

    results: list[SendResult] = Field(default_factory=list)
    sent: int = 0
    failed: int = 0
    queued: int = 0


class DeleteConversationResponse(WireModel):
    """Result of deleting a conversation."""

    success: bool
    conversation_id: str


class DeleteConversationsByProjectResponse(WireModel):
    """Result of deleting a project's conversations."""

    success: bool
    project_id: str
    deleted_count: int


class UnlinkConversationsResponse(WireModel):
    """Result of detaching conversations from a project."""

    success: bool
    project_id: str
    unlinked_count: int


class CheckPriorContactRequest(ProspectIdentifier):
    """Body of ``POST /messaging/check-prior-contact``."""

    channels: list[str] | None = None
    message_limit: int | None = None
    skip_cache: bool | None = None


class PriorContactMessage(WireModel):
    """A historical message with a person."""

    id: str
    direction: str
    content: str
    sender_name: str
    sent_at: str
    subject: str | None = None


class ChannelContactHistory(WireModel):
    """Contact history with a person on one channel."""

    channel: str
    has_contact: bool
    is_user_initiated: bool = False
    message_count: int = 0
    thread_id: str | None = None
    conversation_id: str | None = None
    first_contact_at: str | None = None
    last_contact_at: str | None = None
    prospect_name: str | None = None
    messages: list[PriorContactMessage] = Field(default_factory=list)


class CheckPriorContactResponse(WireModel):
    """Whether any channel has prior contact with a person."""

    has_prior_contact: bool
    channels_checked: list[str] = Field(default_factory=list)
    channels_with_contact: list[str] = Field(default_factory=list)
    contact_history: list[ChannelContactHistory] = Field(default_factory=list)
    cached: bool = False


class BatchProspectIdentifier(ProspectIdentifier):
    """A prospect in a batch prior-contact check."""

    prospect_id: str


class BatchCheckPriorContactRequest(WireModel):
    """Body of ``POST /messaging/check-prior-contact/batch``."""

    prospects: list[BatchProspectIdentifier]
    channels: list[str] | None = None
    message_limit: int | None = None
    skip_cache: bool | None = None


class ProspectPriorContactResult(WireModel):
    """Prior-contact result for one prospect of a batch."""

    prospect_id: str
    has_prior_contact: bool
    channels_with_contact: list[str] = Field(default_factory=list)
    contact_history: list[ChannelContactHistory] = Field(default_factory=list)
    cached: bool = False
    error: str | None = None


class PriorContactSummary(WireModel):
    """Counts of a batch prior-contact check."""

    total: int
    with_contact: int
    without_contact: int
    errors: int
    cached: int | None = None


class BatchCheckPriorContactResponse(WireModel):
    """Prior-contact results keyed by prospect id."""

    results: dict[str, ProspectPriorContactResult] = Field(default_factory=dict)
    summary: PriorContactSummary


# =============================================================================
# Sequences
# =============================================================================

SequenceChannel = Literal["linkedin", "email"]
ExecutionStatus = Literal[
    "queued",
    "processing",
    "active",
    "waiting_delay",
    "waiting_event",
    "waiting_approval",
    "paused",
    "completed",
    "exited",
    "cancelled",
    "failed",
]
ExecutionMode = Literal["live", "dry_run", "preview"]
ContentSource = Literal["template", "ai_generate", "ai_enhance", "none"]


class ScheduleConfig(WireModel):
    """Send window of a step."""

    send_window_start: str | None = None
    send_window_end: str | None = None
    send_days: list[str] | None = None
    timezone: str | None = None


class StepConfig(WireModel):
    """One step of a sequence template."""

    step_key: str
    name: str
    channel: SequenceChannel
    action: str
    description: str | None = None
    content_source: ContentSource | None = None
    content_template: str | None = None
    ai_instructions: str | None = None
    requires_approval: bool | None = None
    ai_precheck: bool | None = None
    ai_precheck_instructions: str | None = None
    action_config: dict[str, Any] | None = None
    on_failure: Literal["fail", "skip", "retry"] | None = None
    max_retries: int | None = None
    ui_position_x: float | None = None
    ui_position_y: float | None = None
    schedule_config: ScheduleConfig | None = None


class TransitionCondition(WireModel):
    """Guard evaluated before a transition fires."""

    type: str
    field: str | None = None
    operator: str | None = None
    value: Any = None


class TransitionConfig(WireModel):
    """Edge between two steps, fired by an event."""

    event_type: str
    from_step_key: str | None = None
    to_step_key: str | None = None
    event_params: dict[str, Any] | None = None
    conditions: list[TransitionCondition] | None = None
    priority: int | None = None
    delay_days: int | None = None
    delay_hours: int | None = None
    exit_reason: str | None = None
    ui_label: str | None = None


class SequenceTemplateCreate(WireModel):
    """A new sequence template."""

    name: str
    steps: list[StepConfig]
    transitions: list[TransitionConfig]
    description: str | None = None
    use_case: str | None = None


class SequenceTemplateUpdate(WireModel):
    """Partial update of a sequence template."""

    name: str | None = None
    description: str | None = None
    steps: list[StepConfig] | None = None
    transitions: list[TransitionConfig] | None = None


class SequenceTemplateResponse(WireModel):
    """A stored sequence template."""

    id: str
    name: str
    version: int
    is_archived: bool
    created_at: str
    updated_at: str
    steps: list[StepConfig] = Field(default_factory=list)
    transitions: list[TransitionConfig] = Field(default_factory=list)
    times_used: int = 0
    description: str | None = None
    use_case: str | None = None
    avg_reply_rate: float | None = None


class DuplicateTemplateRequest(WireModel):
    """Body of a template duplication."""

    name: str


class SequenceValidationIssue(WireModel):
    """One problem found in a template."""

    message: str
    step_key: str | None = None
    field: str | None = None
    suggestion: str | None = None


class SequenceValidationResponse(WireModel):
    """Result of validating a template without saving it."""

    is_valid: bool
    errors: list[SequenceValidationIssue] = Field(default_factory=list)
    warnings: list[SequenceValidationIssue] = Field(default_factory=list)


class ProspectInput(WireModel):
    """A prospect entered into a sequence."""

    prospect_id: str
    prospect_external_id: str | None = None
    context: dict[str, Any] | None = None


class StartExecutionRequest(WireModel):
    """Body of ``POST /sequences/executions``."""

    template_id: str
    prospects: list[ProspectInput]
    project_id: str | None = None
    step_overrides: dict[str, Any] | None = None
    execution_mode: ExecutionMode | None = None


class StartExecutionResponse(WireModel):
    """Executions created for a batch of prospects."""

    started: int
    template_id: str
    execution_ids: list[str] = Field(default_factory=list)
    project_id: str | None = None


class ExecutionSummary(WireModel):
    """One prospect's run through a template."""

    id: str
    template_id: str
    template_name: str
    prospect_id: str
    status: ExecutionStatus
    created_at: str
    prospect_external_id: str | None = None
    project_id: str | None = None
    current_step_key: str | None = None
    started_at: str | None = None


class StepHistoryEntry(WireModel):
    """A step an execution went through."""

    step_key: str
    status: str
    sent_at: str | None = None
    completed_at: str | None = None
    actual_content: str | None = None


class ExecutionEvent(WireModel):
    """An event recorded against an execution."""

    event_type: str
    created_at: str
    event_data: dict[str, Any] = Field(default_factory=dict)


class ExecutionDetailResponse(ExecutionSummary):
    """An execution with its step history and events."""

    current_step: dict[str, Any] | None = None
    step_history: list[StepHistoryEntry] = Field(default_factory=list)
    events: list[ExecutionEvent] = Field(default_factory=list)


class ExecutionListResponse(WireModel):
    """A page of executions."""

    executions: list[ExecutionSummary] = Field(default_factory=list)
    limit: int = 0
    offset: int = 0


class StepMetric(WireModel):
    """Delivery counters of one step."""

    step_key: str
    sent: int = 0
    delivered: int = 0
    replied: int = 0
    accepted: int = 0


class ExecutionMetricsResponse(WireModel):
    """Aggregated execution statistics."""

    total: int = 0
    filters: dict[str, Any] = Field(default_factory=dict)
    status_counts: dict[str, int] = Field(default_factory=dict)
    step_metrics: list[StepMetric] = Field(default_factory=list)
    funnel: dict[str, int] = Field(default_factory=dict)


class LifecycleOperationRequest(WireModel):
    """Optional reason for pausing or stopping an execution."""

    reason: str | None = None


class LifecycleOperationResponse(WireModel):
    """Result of a lifecycle change."""

    status: str
    message: str = ""


class BulkOperationRequest(WireModel):
    """Selects the executions a bulk lifecycle change applies to."""

    template_id: str | None = None
    project_id: str | None = None
    execution_ids: list[str] | None = None
    reason: str | None = None


class BulkOperationResponse(WireModel):
    """Result of a bulk lifecycle change."""

    status: str
    affected_count: int = 0


class CompleteExecutionRequest(WireModel):
    """Outcome recorded when completing an execution."""

    outcome: str
    notes: str | None = None


class CompleteExecutionResponse(WireModel):
    """Result of completing an execution."""

    status: str
    message: str = ""


class BulkCompleteRequest(CompleteExecutionRequest):
    """Outcome recorded for several executions."""

    execution_ids: list[str]


class BulkCompleteResponse(WireModel):
    """Result of completing several executions."""

    completed: int = 0
    errors: list[dict[str, Any]] = Field(default_factory=list)


class RateLimitStatusResponse(WireModel):
    """Current usage against each rate-limited action; fields vary by action."""


class ApprovalItem(WireModel):
    """A step waiting for human approval."""

    step_execution_id: str
    execution_id: str
    template_id: str
    step_name: str
    channel: str
    action: str
    created_at: str
    project_id: str | None = None
    prospect_external_id: str | None = None
    content: str | None = None
    ai_precheck_result: str | None = None
    ai_precheck_reason: str | None = None


class ApprovalListResponse(WireModel):
    """A page of pending approvals."""

    approvals: list[ApprovalItem] = Field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0
    has_more: bool = False


class ApproveStepRequest(WireModel):
    """Optional notes and edited content for an approval."""

    notes: str | None = None
    modified_content: str | None = None


class RejectStepRequest(WireModel):
    """Reason for rejecting a step."""

    reason: str


class SkipStepRequest(WireModel):
    """Optional reason for skipping a step."""

    reason: str | None = None


class ApprovalResponse(WireModel):
    """Result of approving or rejecting a step."""

    status: str


class SkipStepResponse(WireModel):
    """Result of skipping a step."""

    status: str
    next_step_key: str | None = None


class BulkApprovalRequest(WireModel):
    """Steps acted on together; ``action`` defaults to approve."""

    step_execution_ids: list[str]
    action: Literal["approve", "reject", "skip"] | None = None
    reason: str | None = None


class BulkApprovalError(WireModel):
    """A step a bulk approval could not process."""

    step_execution_id: str
    error: str


class BulkApprovalResponse(WireModel):
    """Result of a bulk approval action."""

    approved: int = 0
    errors: list[BulkApprovalError] = Field(default_factory=list)


class BatchPollItem(WireModel):
    """One query of a batch poll."""

    type: Literal["executions", "metrics", "approvals", "rate_limits"]
    project_ids: list[str] | None = Field(default=None, max_length=20)
    template_id: str | None = None
    status: str | None = None
    limit: int | None = Field(default=None, ge=1, le=100)
    offset: int | None = None


class BatchPollRequest(WireModel):
    """Several sequence queries answered in one round trip."""

    requests: list[BatchPollItem] = Field(min_length=1, max_length=10)


class BatchPollResponse(WireModel):
    """Answers of a batch poll, in request order."""

    results: list[dict[str, Any]] = Field(default_factory=list)


# =============================================================================
# Integrations
# =============================================================================

ConnectionStatus = Literal["pending", "active", "failed", "expired", "not_connected"]


class InitiateConnectionRequest(WireModel):
    """Body of ``POST /integrations/connections/initiate``."""

    user_id: str
    app_name: str
    provider: str | None = None
    redirect_url: str | None = None
    success_redirect_url: str | None = None
    failure_redirect_url: str | None = None
    auth_mode: str | None = None
    connection_params: dict[str, Any] | None = None


class InitiateConnectionResponse(WireModel):
    """Where to send the user to finish an OAuth flow."""

    status: str
    redirect_url: str | None = None
    message: str | None = None


class ConnectionStatusResponse(WireModel):
    """Status of one user's connection to one app."""

    app_name: str
    status: ConnectionStatus
    connected_at: str | None = None
    error_message: str | None = None
    is_enabled: bool | None = None


class ConnectionInfo(WireModel):
    """A stored connection."""

    tenant_id: str
    user_id: str
    provider: str
    app_name: str
    status: ConnectionStatus
    connection_id: str | None = None
    connected_at: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class UserConnectionsResponse(WireModel):
    """All connections of a user."""

    user_id: str
    connections: list[ConnectionInfo] = Field(default_factory=list)


class GetToolsRequest(WireModel):
    """Body of ``POST /integrations/tools``."""

    user_id: str
    provider: str | None = None
    app_filter: list[str] | None = None


class ToolInfo(WireModel):
    """A tool exposed through a connected app."""

    name: str
    description: str
    app_name: str
    parameters: dict[str, Any] | None = None


class GetToolsResponse(WireModel):
    """Tools available to a user."""

    user_id: str
    tools: list[ToolInfo] = Field(default_factory=list)
    tool_count: int = 0


class DisconnectRequest(WireModel):
    """Body of ``POST /integrations/connections/disconnect``."""

    user_id: str
    app_name: str
    provider: str | None = None


class ConnectionCallbackRequest(WireModel):
    """OAuth callback parameters forwarded by a custom flow."""

    connection_id: str
    code: str | None = None
    state: str | None = None
    error: str | None = None


class ConnectionCallbackResponse(WireModel):
    """Result of handling an OAuth callback."""

    success: bool
    status: str
    message: str


class StatusMessageResponse(WireModel):
    """Success flag with a human-readable message."""

    success: bool
    message: str


class AppsListResponse(WireModel):
    """Apps enabled for the tenant, grouped by provider."""

    providers: dict[str, list[str]] = Field(default_factory=dict)
    total_providers: int = 0
    enabled_apps: list[str] | None = None
    total_enabled: int | None = None
    available_apps: list[str] | None = None
    total_available: int | None = None


class AppEnabledResponse(WireModel):
    """Whether an app is enabled for the tenant."""

    app_name: str
    enabled: bool
    provider: str | None = None
    message: str = ""


class UpdateAppStatusResponse(WireModel):
    """Result of enabling or disabling an app."""

    app_name: str
    enabled: bool
    message: str = ""
    updated_at: str | None = None


# =============================================================================
# Files
# =============================================================================

FileScope = Literal["user", "tenant"]
ProcessingStatus = Literal[
    "pending", "parsing", "embedding", "completed", "partial_success", "error"
]
FileContentType = Literal["text", "transcript", "summary", "structured"]
DuplicateHandling = Literal["error", "skip", "replace", "suffix"]


class FileMetadata(WireModel):
    """A stored file and its processing state."""

    id: str
    tenant_id: str
    file_name: str
    original_file_name: str
    file_type: str
    mime_type: str
    file_size: int
    file_scope: FileScope
    processing_status: ProcessingStatus
    created_at: str
    updated_at: str
    total_chunks: int = 0
    chunks_embedded: int = 0
    user_id: str | None = None
    tags: list[str] | None = None
    blob_url: str | None = None
    error_message: str | None = None
    deleted_at: str | None = None


class FileUploadResponse(WireModel):
    """Acknowledgement of an upload."""

    file_id: str
    file_name: str
    status: ProcessingStatus
    message: str = ""


class UploadFailure(WireModel):
    """A file a bulk upload rejected."""

    filename: str
    error: str


class BulkUploadResponse(WireModel):
    """Result of a bulk upload."""

    uploaded: list[FileUploadResponse] = Field(default_factory=list)
    failed: list[UploadFailure] = Field(default_factory=list)
    total_uploaded: int = 0
    total_failed: int = 0


class FileContentResponse(WireModel):
    """Extracted content of a file, optionally a line range."""

    file_id: str
    content_type: FileContentType
    text: str
    metadata: dict[str, Any] | None = None
    start_line: int | None = None
    end_line: int | None = None
    total_lines: int | None = None


class FileChunk(WireModel):
    """An embedded chunk of a file."""

    id: str
    chunk_index: int
    chunk_text: str
    start_line: int | None = None
    end_line: int | None = None
    token_count: int | None = None
    metadata: dict[str, Any] | None = None
    similarity_score: float | None = None


class FileSearchResult(WireModel):
    """A file matched by semantic search."""

    file: FileMetadata
    overall_score: float
    chunks: list[FileChunk] = Field(default_factory=list)


class FileSearchRequest(WireModel):
    """Body of ``POST /files/search``."""

    query: str
    limit: int | None = None
    min_score: float | None = None
    file_types: list[str] | None = None
    tags: list[str] | None = None
    user_id: str | None = None


class FileSearchResponse(WireModel):
    """Semantic search results."""

    query: str
    results: list[FileSearchResult] = Field(default_factory=list)
    total_count: int = 0
    processing_time_ms: float | None = None


class ProcessingStatusResponse(WireModel):
    """Progress of a file through parsing and embedding."""

    status: ProcessingStatus
    progress_percentage: float = 0
    chunks_embedded: int = 0
    total_chunks: int = 0
    estimated_time_remaining_seconds: float | None = None
    error_message: str | None = None
    jobs: list[dict[str, Any]] | None = None


class FileListResponse(WireModel):
    """A page of files."""

    files: list[FileMetadata] = Field(default_factory=list)
    total_count: int = 0
    page: int = 1
    limit: int = 0
    has_more: bool = False


class FileScopeUpdateRequest(WireModel):
    """Body of ``PATCH /files/{id}/scope``."""

    scope: FileScope
    user_id: str | None = None


class FileDeleteResponse(WireModel):
    """Result of deleting a file."""

    message: str
    file_id: str
    hard_delete: bool


class BulkDeleteRequest(WireModel):
    """Files to delete together."""

    file_ids: list[str] = Field(min_length=1)


class BulkDeleteResponse(WireModel):
    """Result of a bulk delete."""

    deleted: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    hard_delete: bool = True
    total_requested: int = 0


class FileStatisticsResponse(WireModel):
    """File storage statistics for the tenant."""

    total_files: int = 0
    total_size_bytes: int = 0
    files_by_type: dict[str, int] = Field(default_factory=dict)
    files_by_status: dict[str, int] = Field(default_factory=dict)
    files_by_scope: dict[str, int] = Field(default_factory=dict)
    average_file_size_bytes: float = 0
    average_processing_time_seconds: float | None = None
    storage_usage_percentage: float | None = None


# =============================================================================
# External API keys
# =============================================================================

ApiKeyMode = Literal["platform", "byo_keys"]


class StoreApiKeyRequest(WireModel):
    """A provider API key to store encrypted."""

    #: Provider key name such as ``OPENAI_API_KEY`` or ``EXA_API_KEY``.
    provider: str
    api_key: str = Field(repr=False)


class ExternalApiKeyResponse(WireModel):
    """Metadata of a stored key; the key value is never returned."""

    key_id: str
    provider: str
    is_active: bool
    created_at: str | None = None
    updated_at: str | None = None
    created_by: str | None = None


class ApiKeyModeRequest(WireModel):
    """Body of ``PATCH /external-api-keys/mode``."""

    mode: ApiKeyMode


class ApiKeyModeResponse(WireModel):
    """Whether the tenant uses platform keys or its own."""

    api_key_mode: ApiKeyMode


class DeleteApiKeyResponse(WireModel):
    """Result of deleting a key."""

    message: str
