"""Shared constants: single source of truth.

Centralises run status names, polling defaults, and the fixed user-facing
messages that activities, the poller, and the proxy routes all agree on.

References:
    Apify API v2 run object:
        https://docs.apify.com/api/v2#/reference/actor-runs
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Platform endpoints
# ---------------------------------------------------------------------------

DEFAULT_APIFY_BASE_URL: str = "https://api.apify.com/v2"
"""Base URL of the Apify REST API."""

DEFAULT_PROXY_BASE_URL: str = "http://localhost:7071/api"
"""Base URL of a locally hosted proxy (Functions host default port)."""

# ---------------------------------------------------------------------------
# Run statuses
# ---------------------------------------------------------------------------

STATUS_SUCCEEDED: str = "SUCCEEDED"
STATUS_FAILED: str = "FAILED"
STATUS_ABORTED: str = "ABORTED"
STATUS_TIMED_OUT: str = "TIMED-OUT"

FAILED_STATUSES: frozenset[str] = frozenset({STATUS_FAILED, STATUS_ABORTED, STATUS_TIMED_OUT})
"""Terminal statuses that mean the remote run did not succeed."""

TERMINAL_STATUSES: frozenset[str] = FAILED_STATUSES | {STATUS_SUCCEEDED}

# ---------------------------------------------------------------------------
# Polling defaults
# ---------------------------------------------------------------------------

DEFAULT_MAX_WAIT_SECONDS: float = 300.0
DEFAULT_POLL_INTERVAL_SECONDS: float = 2.0
DEFAULT_ACTOR_LIST_LIMIT: int = 100
DEFAULT_HTTP_TIMEOUT_SECONDS: float = 30.0

# ---------------------------------------------------------------------------
# Fixed messages
# ---------------------------------------------------------------------------

NO_DESCRIPTION_PLACEHOLDER: str = "No description available"
NO_STATUS_MESSAGE: str = "No error message available"
NO_SCHEMA_MESSAGE: str = "No input schema found for this actor"
RUN_TIMEOUT_MESSAGE: str = "Actor run timed out - taking longer than expected"
MISSING_API_KEY_MESSAGE: str = "API key is required"

# Error ``type`` values emitted in proxy error bodies.
SCHEMA_NOT_FOUND_TYPE: str = "schema-not-found"
MISSING_API_KEY_TYPE: str = "missing-api-key"
