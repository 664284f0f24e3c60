"""lumnisai: async client for the Lumnis AI API.

Public API:
    - LumnisClient: resources plus ``invoke`` (wait or stream)
    - Config: configuration dataclass
    - ResponseStream: incremental progress of one response
    - display_progress / ProgressTracker: console progress rendering
    - Typed errors rooted at LumnisError
"""

from __future__ import annotations

import logging

from lumnisai.client import LumnisClient
from lumnisai.config import Config
from lumnisai.errors import (
    AuthenticationError,
    ConfigurationError,
    ErrorKind,
    LocalFileNotSupportedError,
    LumnisError,
    MessagingNotFoundError,
    MessagingValidationError,
    NetworkError,
    NoDataSourcesError,
    NotFoundError,
    RateLimitError,
    ResponseTimeoutError,
    ServerError,
    SourcesNotAvailableError,
    ValidationError,
)
from lumnisai.models import (
    Message,
    PeopleDataSource,
    ProgressEntry,
    ResponseObject,
)
from lumnisai.pagination import collect_all_pages, paginate, parse_link_header
from lumnisai.polling import ResponseStream, StreamState
from lumnisai.progress import (
    ProgressTracker,
    display_progress,
    format_progress_entry,
)
from lumnisai.webhook import verify_webhook_signature

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("lumnisai")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("lumnisai").addHandler(logging.NullHandler())

__all__ = [
    "AuthenticationError",
    "Config",
    "ConfigurationError",
    "ErrorKind",
    "LocalFileNotSupportedError",
    "LumnisClient",
    "LumnisError",
    "Message",
    "MessagingNotFoundError",
    "MessagingValidationError",
    "NetworkError",
    "NoDataSourcesError",
    "NotFoundError",
    "PeopleDataSource",
    "ProgressEntry",
    "ProgressTracker",
    "RateLimitError",
    "ResponseObject",
    "ResponseStream",
    "ResponseTimeoutError",
    "ServerError",
    "SourcesNotAvailableError",
    "StreamState",
    "ValidationError",
    "collect_all_pages",
    "display_progress",
    "format_progress_entry",
    "paginate",
    "parse_link_header",
    "verify_webhook_signature",
]
