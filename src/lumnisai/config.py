"""Configuration: frozen Config resolved from arguments and environment."""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

from lumnisai.constants import (
    API_KEY_ENV_VAR,
    BASE_URL_ENV_VAR,
    DEFAULT_BASE_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_S,
    TENANT_ID_ENV_VAR,
)
from lumnisai.errors import ConfigurationError
from lumnisai.models import Scope

load_dotenv()


@dataclass(frozen=True)
class Config:
    """Immutable client configuration.

    Unset values fall back to ``LUMNISAI_API_KEY``, ``LUMNISAI_TENANT_ID``
    and ``LUMNISAI_BASE_URL``; the base URL finally defaults to the public
    endpoint.

    Example:
        config = Config(tenant_id="acme")
        # API key is resolved from LUMNISAI_API_KEY
    """

    #: Auto-resolved from ``LUMNISAI_API_KEY`` when *None*.
    api_key: str | None = None
    tenant_id: str | None = None
    base_url: str | None = None
    timeout_s: float = DEFAULT_TIMEOUT_S
    max_retries: int = DEFAULT_MAX_RETRIES
    #: Default scope for ``invoke``; overridden per call.
    scope: Scope = "tenant"

    def __post_init__(self) -> None:
        """Resolve unset values from the environment and validate."""
        if not self.api_key:
            object.__setattr__(self, "api_key", os.environ.get(API_KEY_ENV_VAR))
        if not self.tenant_id:
            object.__setattr__(
                self, "tenant_id", os.environ.get(TENANT_ID_ENV_VAR) or None
            )
        if not self.base_url:
            object.__setattr__(
                self,
                "base_url",
                os.environ.get(BASE_URL_ENV_VAR) or DEFAULT_BASE_URL,
            )

        if not self.api_key:
            raise ConfigurationError(
                "API key is required",
                hint=f"Set {API_KEY_ENV_VAR} environment variable or pass api_key=...",
            )
        if self.scope not in ("user", "tenant"):
            raise ConfigurationError(
                f"Unknown scope: {self.scope!r}",
                hint="Supported scopes: 'user', 'tenant'",
            )
        if self.timeout_s <= 0:
            raise ConfigurationError(
                f"timeout_s must be > 0, got {self.timeout_s}",
                hint="This is the per-attempt request timeout in seconds.",
            )
        if self.max_retries < 0:
            raise ConfigurationError(
                f"max_retries must be >= 0, got {self.max_retries}",
                hint="Use max_retries=0 to disable retries.",
            )

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        return (
            f"Config(api_key={'[REDACTED]' if self.api_key else None}, "
            f"tenant_id={self.tenant_id!r}, base_url={self.base_url!r}, "
            f"scope={self.scope!r})"
        )

    __repr__ = __str__
