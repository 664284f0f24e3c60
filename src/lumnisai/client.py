"""LumnisClient: resources plus the ``invoke`` orchestration entry point."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import copy
import dataclasses
import logging
from typing import TYPE_CHECKING, Any, Literal, Union, overload

from lumnisai._http import Http, HttpOptions
from lumnisai.config import Config
from lumnisai.constants import (
    API_PREFIX,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_WAIT_S,
    DEFAULT_POLL_INTERVAL_S,
    DEFAULT_TIMEOUT_S,
    LONG_POLL_TIMEOUT_S,
)
from lumnisai.errors import ConfigurationError
from lumnisai.models import CreateResponseRequest, Message, ResponseObject, Scope
from lumnisai.polling import (
    ProgressCallback,
    ResponseStream,
    start_stream,
    wait_for_response,
)
from lumnisai.progress import simple_progress_callback
from lumnisai.resources import (
    ExternalApiKeysResource,
    FilesResource,
    IntegrationsResource,
    MessagingResource,
    PeopleResource,
    ResponsesResource,
    SequencesResource,
    SkillsResource,
    TenantInfoResource,
    ThreadsResource,
    UsersResource,
)

if TYPE_CHECKING:
    from types import TracebackType

    import httpx

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"

MessageLike = Union[str, Message, Mapping[str, Any]]
InvokeMessages = Union[MessageLike, Sequence[MessageLike]]


def _to_message(item: MessageLike) -> Message:
    if isinstance(item, Message):
        return item
    if isinstance(item, str):
        return Message(role="user", content=item)
    return Message.model_validate(item)


def normalize_messages(messages: InvokeMessages) -> list[Message]:
    """Turn a string, a message, or a list of either into a message list.

    A bare string becomes a single ``user`` message.
    """
    if isinstance(messages, (str, Message, Mapping)):
        return [_to_message(messages)]
    normalized = [_to_message(m) for m in messages]
    if not normalized:
        raise ConfigurationError(
            "messages must not be empty",
            hint="Pass a prompt string or at least one message.",
        )
    return normalized


class LumnisClient:
    """Async client for the Lumnis API.

    Example:
        async with LumnisClient(api_key="...") as client:
            response = await client.invoke("Find 10 Python engineers in Berlin")
            print(response.output_text)
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        tenant_id: str | None = None,
        base_url: str | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        max_retries: int = DEFAULT_MAX_RETRIES,
        scope: Scope = "tenant",
        config: Config | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Build a client from arguments, the environment, or a ``Config``.

        Args:
            api_key: API key; falls back to ``LUMNISAI_API_KEY``.
            tenant_id: Tenant id; falls back to ``LUMNISAI_TENANT_ID``.
            base_url: API root; falls back to ``LUMNISAI_BASE_URL``.
            timeout_s: Per-attempt request timeout.
            max_retries: Retries after the first attempt.
            scope: Default scope for ``invoke``.
            config: Prebuilt configuration; other settings are ignored.
            transport: Optional httpx transport, mainly for tests.

        Raises:
            ConfigurationError: No API key could be resolved.
        """
        if config is None:
            config = Config(
                api_key=api_key,
                tenant_id=tenant_id,
                base_url=base_url,
                timeout_s=timeout_s,
                max_retries=max_retries,
                scope=scope,
            )
        self._config = config
        self._scoped_user_id: str | None = None
        self._http = Http(
            HttpOptions(
                base_url=config.base_url or "",
                api_prefix=API_PREFIX,
                headers={API_KEY_HEADER: config.api_key or ""},
                timeout_s=config.timeout_s,
                max_retries=config.max_retries,
            ),
            transport=transport,
        )

        self.responses = ResponsesResource(self._http)
        self.threads = ThreadsResource(self._http)
        self.users = UsersResource(self._http)
        self.tenant_info = TenantInfoResource(self._http)
        self.skills = SkillsResource(self._http)
        self.people = PeopleResource(self._http)
        self.messaging = MessagingResource(self._http)
        self.sequences = SequencesResource(self._http)
        self.integrations = IntegrationsResource(self._http)
        self.files = FilesResource(self._http)
        self.external_api_keys = ExternalApiKeysResource(self._http)

    @property
    def config(self) -> Config:
        """Resolved configuration."""
        return self._config

    @property
    def tenant_id(self) -> str | None:
        """Tenant id, when one was configured."""
        return self._config.tenant_id

    @property
    def scoped_user_id(self) -> str | None:
        """User id bound by ``for_user``, if any."""
        return self._scoped_user_id

    def for_user(self, user_id: str) -> LumnisClient:
        """Return a user-scoped view of this client.

        The view shares this client's connection pool; closing the parent
        client closes it for both.
        """
        if not user_id:
            raise ConfigurationError("user_id must be a non-empty string")
        scoped = copy.copy(self)
        scoped._config = dataclasses.replace(self._config, scope="user")
        scoped._scoped_user_id = user_id
        return scoped

    async def aclose(self) -> None:
        """Release the underlying HTTP connection pool."""
        await self._http.aclose()

    async def __aenter__(self) -> LumnisClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def _build_request(
        self,
        messages: InvokeMessages,
        *,
        scope: Scope | None,
        user_id: str | None,
        request_options: dict[str, Any],
    ) -> CreateResponseRequest:
        effective_user_id = user_id or self._scoped_user_id
        effective_scope = scope or self._config.scope
        if effective_user_id and effective_scope == "tenant":
            effective_scope = "user"

        if effective_scope == "user" and not effective_user_id:
            raise ConfigurationError(
                "user_id is required for user scope",
                hint="Pass user_id=... or use client.for_user(user_id).",
            )
        if effective_scope == "tenant":
            self._http.warn_tenant_scope()

        return CreateResponseRequest(
            messages=normalize_messages(messages),
            user_id=effective_user_id,
            **request_options,
        )

    @overload
    async def invoke(
        self,
        messages: InvokeMessages,
        *,
        stream: Literal[False] = False,
        show_progress: bool | None = None,
        progress_callback: ProgressCallback | None = None,
        scope: Scope | None = None,
        user_id: str | None = None,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
        max_wait_s: float = DEFAULT_MAX_WAIT_S,
        **request_options: Any,
    ) -> ResponseObject: ...

    @overload
    async def invoke(
        self,
        messages: InvokeMessages,
        *,
        stream: Literal[True],
        show_progress: bool | None = None,
        progress_callback: ProgressCallback | None = None,
        scope: Scope | None = None,
        user_id: str | None = None,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
        max_wait_s: float = DEFAULT_MAX_WAIT_S,
        **request_options: Any,
    ) -> ResponseStream: ...

    async def invoke(
        self,
        messages: InvokeMessages,
        *,
        stream: bool = False,
        show_progress: bool | None = None,
        progress_callback: ProgressCallback | None = None,
        scope: Scope | None = None,
        user_id: str | None = None,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
        max_wait_s: float = DEFAULT_MAX_WAIT_S,
        **request_options: Any,
    ) -> ResponseObject | ResponseStream:
        """Create a response and either wait for it or stream its progress.

        Args:
            messages: A prompt string, a message, or a list of messages.
            stream: When True, return a ``ResponseStream`` instead of waiting.
            show_progress: Print progress lines while waiting. Defaults to
                on when waiting; streaming never prints.
            progress_callback: Called with every fetched snapshot while
                waiting; replaces the built-in printer.
            scope: ``"user"`` or ``"tenant"``; a user id forces user scope.
            user_id: User the response belongs to.
            poll_interval_s: Sleep between fetches.
            max_wait_s: Wall-clock budget when waiting (ignored by streams).
            **request_options: Further ``CreateResponseRequest`` fields such
                as ``thread_id``, ``files`` or ``agent_config``.

        Returns:
            The terminal ``ResponseObject``, or a ``ResponseStream``.

        Raises:
            ConfigurationError: User scope without a user id.
            ResponseTimeoutError: The wait exceeded ``max_wait_s``.
        """
        request = self._build_request(
            messages, scope=scope, user_id=user_id, request_options=request_options
        )

        if stream:
            if show_progress:
                logger.warning("show_progress is not supported in streaming mode.")
            return await start_stream(
                self.responses,
                request,
                poll_interval_s=poll_interval_s,
                long_poll_s=LONG_POLL_TIMEOUT_S,
            )

        callback = progress_callback
        if callback is None and show_progress is not False:
            callback = simple_progress_callback()
        return await wait_for_response(
            self.responses,
            request,
            poll_interval_s=poll_interval_s,
            max_wait_s=max_wait_s,
            long_poll_s=LONG_POLL_TIMEOUT_S,
            on_progress=callback,
        )
