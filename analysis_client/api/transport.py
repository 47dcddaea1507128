"""Shared ``httpx`` plumbing for the HTTP collaborators and the poller.

Maps transport-level problems onto the client taxonomy:

- ``httpx.RequestError`` / unusable URL → ``ConnectionFailure``
- non-JSON body                         → ``ProtocolFailure``
- non-2xx status                        → ``classify`` → ``AuthorizationFailure``
  or ``UpstreamHttpFailure``
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from analysis_client.api.outcome import AUTH_STATUS_CODES, OutcomeKind, classify
from analysis_client.core.constants import DEFAULT_HTTP_TIMEOUT_S
from analysis_client.core.exceptions import (
    AuthorizationFailure,
    ConnectionFailure,
    ProtocolFailure,
    UpstreamHttpFailure,
)
from analysis_client.utils.helpers import is_http_url

logger = logging.getLogger(__name__)


def new_http_client(timeout_s: float = DEFAULT_HTTP_TIMEOUT_S) -> httpx.Client:
    """Return an ``httpx.Client`` configured the way every collaborator expects."""
    return httpx.Client(timeout=timeout_s, follow_redirects=True)


def send(
    client: httpx.Client,
    method: str,
    url: str,
    *,
    stage: str,
    headers: dict[str, str] | None = None,
    json_body: Any = None,
    params: dict[str, Any] | None = None,
) -> httpx.Response:
    """Send one request, translating transport errors into ``ConnectionFailure``.

    Raises:
        ConnectionFailure: If *url* is not an absolute http(s) URL or the
            request could not be delivered.
    """
    if not is_http_url(url):
        msg = f"Invalid API URL: {url!r}"
        raise ConnectionFailure(msg, stage=stage)

    try:
        return client.request(method, url, headers=headers, json=json_body, params=params)
    except httpx.RequestError as exc:
        msg = f"Connection to {url} failed: {exc}"
        raise ConnectionFailure(msg, stage=stage) from exc


def parse_json(response: httpx.Response, *, stage: str) -> Any:
    """Decode a JSON response body.

    Raises:
        ProtocolFailure: If the body is not valid JSON.
    """
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = f"JSON parse error: {exc}"
        raise ProtocolFailure(msg, stage=stage) from exc


def raise_for_outcome(
    response: httpx.Response,
    *,
    stage: str,
    access_token: str | None = None,
    auth_codes: frozenset[int] = AUTH_STATUS_CODES,
    failure_message: str = "",
) -> None:
    """Raise the taxonomy error matching a non-2xx *response*.

    Args:
        response: The HTTP response to check.
        stage: Client stage recorded on the raised error.
        access_token: Token that was sent, attached to authorization failures.
        auth_codes: Status codes that mean the token was rejected.
        failure_message: Prefix for ``UpstreamHttpFailure``; defaults to the
            service's own ``error`` text.

    Raises:
        AuthorizationFailure: If the status code is in *auth_codes*.
        UpstreamHttpFailure: For any other non-2xx status code.
    """
    outcome = classify(response.status_code, _maybe_json(response), auth_codes=auth_codes)
    if outcome.ok:
        return

    if outcome.kind is OutcomeKind.AUTHORIZATION_FAILURE:
        logger.info(
            "Authorization failure | stage=%s | status=%d",
            stage,
            outcome.status_code,
        )
        raise AuthorizationFailure(
            outcome.detail or f"Unauthorized request, HTTP status code: {outcome.status_code}",
            status_code=outcome.status_code,
            access_token=access_token,
            stage=stage,
        )

    msg = failure_message or outcome.detail or f"HTTP status code: {outcome.status_code}"
    raise UpstreamHttpFailure(msg, status_code=outcome.status_code, stage=stage)


def _maybe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
