"""Pure classification of HTTP responses into client outcomes.

``classify`` is the single place that knows which status codes mean
"success", "re-authenticate" and "upstream failure".  Callers turn the
returned ``Outcome`` into a value or an exception; the backoff loop
never looks at status codes directly.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from analysis_client.models.payloads import ErrorBody

#: Status codes treated as "the token was rejected".
AUTH_STATUS_CODES: frozenset[int] = frozenset({401, 403})

#: The analyses endpoints answer 404 for jobs the token may not see.
ANALYSIS_AUTH_STATUS_CODES: frozenset[int] = AUTH_STATUS_CODES | {404}


class OutcomeKind(enum.Enum):
    SUCCESS = "success"
    AUTHORIZATION_FAILURE = "authorization_failure"
    UPSTREAM_FAILURE = "upstream_failure"


@dataclass(frozen=True, slots=True)
class Outcome:
    """Tagged result of ``classify``.

    Attributes:
        kind: Which branch the caller must take.
        status_code: The HTTP status code that was classified.
        detail: Service-provided error text, empty when absent.
    """

    kind: OutcomeKind
    status_code: int
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


def classify(
    status_code: int,
    body: Any = None,
    *,
    auth_codes: frozenset[int] = AUTH_STATUS_CODES,
) -> Outcome:
    """Classify an HTTP status code (and parsed body) into an ``Outcome``.

    Args:
        status_code: HTTP status code of the response.
        body: Parsed JSON body, or ``None`` when absent or unparseable.
        auth_codes: Status codes that mean the bearer token was rejected.

    Returns:
        An ``Outcome`` whose ``detail`` carries the body's ``error`` text
        for failures.
    """
    if 200 <= status_code <= 299:
        return Outcome(OutcomeKind.SUCCESS, status_code)

    kind = (
        OutcomeKind.AUTHORIZATION_FAILURE
        if status_code in auth_codes
        else OutcomeKind.UPSTREAM_FAILURE
    )
    return Outcome(kind, status_code, _error_detail(body))


def _error_detail(body: Any) -> str:
    if not isinstance(body, dict):
        return ""
    try:
        return ErrorBody.model_validate(body).error
    except PydanticValidationError:
        return ""
