"""Shared client constants: single source of truth.

Centralises the API paths, default timings and the poll ceiling used by
the poller, the collaborators and the client.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Service endpoints
# ---------------------------------------------------------------------------

DEFAULT_API_URL: str = "https://api.mythx.io"
"""Default analysis service base URL (no version suffix)."""

API_VERSION: str = "v1"
"""Version segment prefixed to every API path."""

ANALYSES_PATH: str = f"/{API_VERSION}/analyses"
LOGIN_PATH: str = f"/{API_VERSION}/auth/login"
REFRESH_PATH: str = f"/{API_VERSION}/auth/refresh"
VERSION_PATH: str = f"/{API_VERSION}/version"
OPENAPI_PATH: str = f"/{API_VERSION}/openapi.yaml"

TRIAL_USER_ID: str = "123456789012345678901234"
"""User id granted limited access without a password."""

# ---------------------------------------------------------------------------
# Polling
# ---------------------------------------------------------------------------

DEFAULT_POLL_TIMEOUT_MS: int = 60_000
"""Default poll budget per call; the initial delay counts against it."""

DEFAULT_INITIAL_DELAY_MS: int = 30_000
"""Default wait before the first status check."""

INITIAL_POLL_STEP_MS: int = 1_000
"""First backoff step; doubles after every in-progress status check."""

MAX_POLLS: int = 10
"""Hard ceiling on status checks per job, regardless of the timeout.

A caller asking for an hour-long timeout still gets at most this many
checks, each spaced further apart than the last.
"""

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

DEFAULT_HTTP_TIMEOUT_S: float = 30.0
"""Per-request timeout for the underlying ``httpx.Client``."""
