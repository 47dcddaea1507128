"""Unified client exception taxonomy.

Every error raised by the client inherits from ``ClientError`` and
carries structured context fields so callers can tell "try again later"
apart from "fatal" and from "re-authenticate".

Taxonomy categories
-------------------
- ``ValidationError``  : bad caller input or options, never retryable.
- ``TransientError``   : temporary failures (network, poll budget), retryable.
- ``PermanentError``   : unrecoverable remote failures, not retryable.
- ``ContractError``    : response body does not match the wire contract.

Concrete classes
----------------
- ``AuthorizationFailure``: the only error the client intercepts; it
  triggers exactly one token refresh and replay of the failed call.
- ``ConnectionFailure``   : network / DNS / malformed base URL.
- ``RemoteJobFailure``    : the service reported the job as ``Error``.
- ``PollTimeout``         : the poll budget (time or count) ran out.
- ``ProtocolFailure``     : non-JSON or missing-field response bodies.
- ``UpstreamHttpFailure`` : any other non-2xx HTTP response.

``to_error_dict()`` flattens any of them into a dict for log records.
"""

from __future__ import annotations


class ClientError(Exception):
    """Root of every error the client raises.

    Attributes:
        message: Text shown to the caller.
        stage: Where in a call the failure happened (``"login"``,
            ``"submit"``, ``"poll"``, ``"refresh"`` ...).
        code: Stable identifier such as ``"POLL_TIMEOUT"``.
        retryable: ``True`` when calling again later could succeed.
    """

    default_stage: str = ""
    default_code: str = ""
    default_retryable: bool = False

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool | None = None,
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = self.default_retryable if retryable is None else retryable
        super().__init__(message)

    @property
    def category(self) -> str:
        """Coarse bucket for logs, e.g. ``"transient"`` or ``"authorization"``."""
        for base, name in _CATEGORIES:
            if isinstance(self, base):
                return name
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Flatten the error into a dict for structured log records."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
        }


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class ValidationError(ClientError):
    """Bad arguments or options passed by the caller."""

    default_code = "VALIDATION_FAILED"


class TransientError(ClientError):
    """The same call may work on a later attempt."""

    default_retryable = True


class PermanentError(ClientError):
    """Repeating the call will fail the same way."""


class ContractError(ClientError):
    """The service answered with a body this client cannot read."""


# ---------------------------------------------------------------------------
# Concrete failures
# ---------------------------------------------------------------------------


class AuthorizationFailure(ClientError):
    """The service rejected the bearer token (401/403, or 404 on analyses).

    Attributes:
        status_code: HTTP status code that triggered the failure.
        access_token: The token that was rejected.
    """

    default_code = "UNAUTHORIZED"

    def __init__(
        self,
        message: str = "Unauthorized",
        *,
        status_code: int = 401,
        access_token: str | None = None,
        stage: str = "",
    ) -> None:
        self.status_code = status_code
        self.access_token = access_token
        super().__init__(message, stage=stage, retryable=False)


class ConnectionFailure(TransientError):
    """Network-level failure: unreachable host, DNS, malformed URL."""

    default_code = "CONNECTION_FAILED"


class RemoteJobFailure(PermanentError):
    """The service finished the job in its terminal ``Error`` state.

    Attributes:
        job_id: Identifier of the failed job.
    """

    default_stage = "poll"
    default_code = "ANALYSIS_FAILED"

    def __init__(self, job_id: str, message: str = "Analysis failed") -> None:
        self.job_id = job_id
        super().__init__(message)


class PollTimeout(TransientError):
    """The poll budget was exhausted before the job reached a terminal state.

    Attributes:
        job_id: Identifier of the job, which may still be running.
        elapsed_s: Seconds spent polling before giving up.
        polls: Number of status checks performed.
    """

    default_stage = "poll"
    default_code = "POLL_TIMEOUT"

    def __init__(self, job_id: str, elapsed_s: float, polls: int) -> None:
        self.job_id = job_id
        self.elapsed_s = elapsed_s
        self.polls = polls
        message = (
            f"Time out reached after {elapsed_s:g} seconds ({polls} status checks).\n"
            "Analysis continues on the server and may have completed; run again?\n"
            f"For status reference, job id is {job_id}"
        )
        super().__init__(message)


class ProtocolFailure(ContractError):
    """Response body was not JSON or lacked a required field."""

    default_code = "PROTOCOL_FAILED"


class UpstreamHttpFailure(PermanentError):
    """Non-2xx HTTP response that is not an authorization failure.

    Attributes:
        status_code: HTTP status code returned by the service.
    """

    default_code = "UPSTREAM_HTTP_FAILED"

    def __init__(self, message: str, *, status_code: int, stage: str = "") -> None:
        self.status_code = status_code
        super().__init__(message, stage=stage)


_CATEGORIES: tuple[tuple[type[ClientError], str], ...] = (
    (ContractError, "contract"),
    (ValidationError, "validation"),
    (TransientError, "transient"),
    (PermanentError, "permanent"),
    (AuthorizationFailure, "authorization"),
)
