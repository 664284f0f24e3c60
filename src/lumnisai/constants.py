"""Default values shared across the Lumnis client."""

# ==============================================================================
# API
# ==============================================================================

DEFAULT_BASE_URL = "https://api.lumnis.ai"
API_PREFIX = "/v1"

API_KEY_ENV_VAR = "LUMNISAI_API_KEY"
TENANT_ID_ENV_VAR = "LUMNISAI_TENANT_ID"
BASE_URL_ENV_VAR = "LUMNISAI_BASE_URL"

# ==============================================================================
# HTTP timeouts and retries
# ==============================================================================

DEFAULT_TIMEOUT_S = 30.0
DEFAULT_MAX_RETRIES = 3
# Upper bound (seconds) of the random jitter added to exponential backoff.
DEFAULT_BACKOFF_FACTOR = 0.5
MAX_BACKOFF_S = 10.0

# ==============================================================================
# Polling
# ==============================================================================

DEFAULT_POLL_INTERVAL_S = 2.0
DEFAULT_MAX_WAIT_S = 300.0
LONG_POLL_TIMEOUT_S = 10

# ==============================================================================
# Pagination
# ==============================================================================

DEFAULT_LIMIT = 50
MAX_LIMIT = 100
