"""Collaborator interfaces consumed by the client and the poller.

The client talks to the service exclusively through these four seams,
so tests (or alternative transports) can inject fakes without touching
module state.

Lifecycle:
    1. ``Authenticator.login(credentials, api_url)``    : credentials → tokens.
    2. ``Submitter.submit(payload, token, api_url)``    : work → ``JobHandle``.
    3. ``Poller.poll(job_id, token, api_url)``          : see ``orchestrators.poller``.
    4. ``TokenRefresher.refresh(tokens, api_url)``      : expired pair → renewed pair.

``SimpleRequester`` covers every other one-shot GET.

Any implementation must raise ``AuthorizationFailure`` when the service
rejects the token; that is the only error the client reacts to.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from analysis_client.models.jobs import JobHandle
    from analysis_client.models.session import Credentials, TokenPair


class Authenticator(abc.ABC):
    """Exchanges long-lived credentials for a fresh token pair."""

    @abc.abstractmethod
    def login(self, credentials: Credentials, api_url: str) -> TokenPair:
        """Log in and return the issued tokens.

        Raises:
            ClientError: Any taxonomy error; the client propagates it as is.
        """


class TokenRefresher(abc.ABC):
    """Exchanges an expired token pair for a renewed one."""

    @abc.abstractmethod
    def refresh(self, tokens: TokenPair, api_url: str) -> TokenPair:
        """Return the renewed pair.

        Raises:
            ClientError: Any taxonomy error; the client propagates it as is.
        """


class Submitter(abc.ABC):
    """Sends a work payload and returns the job it created."""

    @abc.abstractmethod
    def submit(
        self,
        payload: dict[str, Any],
        access_token: str,
        api_url: str,
    ) -> JobHandle:
        """Submit *payload* for analysis.

        Raises:
            AuthorizationFailure: If the token was rejected.
        """


class SimpleRequester(abc.ABC):
    """Performs a single GET and returns the decoded body."""

    @abc.abstractmethod
    def request(
        self,
        url: str,
        *,
        access_token: str | None = None,
        params: dict[str, Any] | None = None,
        json: bool = False,
    ) -> Any:
        """Fetch *url*; decode JSON when *json* is true, else return text.

        Raises:
            AuthorizationFailure: If a token was sent and rejected.
        """
