"""Authenticated-call client: the orchestration entry point.

``Client`` owns a ``Session`` and wraps every authenticated operation in
one policy:

1. No access token yet → log in with the stored credentials.  Login
   failures propagate as is.
2. Call the operation with the cached access token.
3. ``AuthorizationFailure`` → refresh the token pair exactly once and
   replay the operation once with the renewed access token.  The replay's
   outcome is final; a refresh failure propagates as is.
4. Any other failure propagates as is, with no refresh.

Per top-level call::

    Unauthenticated → Authenticating → Calling ─┬─> Success
                                                 ├─> Failure
                                                 └─> RefreshingOnAuthFailure
                                                       → RetryingCall → Success | Failure

Two operations use the policy: ``analyze`` (submit, then poll) and
``analyses`` (one authenticated listing query).

Concurrency:
    Threads may share one ``Client``.  Login and refresh run under
    ``Session.lock`` so one thread's renewed tokens are never overwritten
    by another's; the lock is released before the operation itself runs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from analysis_client.api.login import HttpAuthenticator
from analysis_client.api.refresh import HttpTokenRefresher
from analysis_client.api.requester import HttpSubmitter
from analysis_client.api.simple_requester import HttpSimpleRequester
from analysis_client.api.transport import new_http_client
from analysis_client.core.config import ClientConfig
from analysis_client.core.constants import (
    ANALYSES_PATH,
    DEFAULT_API_URL,
    DEFAULT_INITIAL_DELAY_MS,
    DEFAULT_POLL_TIMEOUT_MS,
    OPENAPI_PATH,
    VERSION_PATH,
)
from analysis_client.core.exceptions import AuthorizationFailure, ValidationError
from analysis_client.models.session import Credentials, Session
from analysis_client.orchestrators.poller import Poller
from analysis_client.utils.helpers import build_url, is_http_url

if TYPE_CHECKING:
    import httpx

    from analysis_client.api.base import (
        Authenticator,
        SimpleRequester,
        Submitter,
        TokenRefresher,
    )
    from analysis_client.core.clock import Clock

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Client:
    """Client for the remote analysis service.

    Args:
        auth: ``Credentials`` or a mapping of their fields (``email``,
            ``eth_address``, ``user_id``, ``password``, ``api_key``).
            ``None`` logs in as the trial user.
        api_url: Service base URL.
        authenticator: Login collaborator.
        refresher: Refresh collaborator.
        submitter: Submit collaborator.
        poller: Poller used by ``analyze``.
        requester: Simple requester used by ``analyses``.
        http: Shared ``httpx.Client`` for the default collaborators.
        clock: Clock for the default poller.
        poll_timeout_ms: Default poll budget for ``analyze``.
        initial_delay_ms: Default initial poll delay for ``analyze``.

    Raises:
        ValidationError: If the auth options or *api_url* are invalid.
    """

    def __init__(
        self,
        auth: Credentials | Mapping[str, str] | None = None,
        api_url: str = DEFAULT_API_URL,
        *,
        authenticator: Authenticator | None = None,
        refresher: TokenRefresher | None = None,
        submitter: Submitter | None = None,
        poller: Poller | None = None,
        requester: SimpleRequester | None = None,
        http: httpx.Client | None = None,
        clock: Clock | None = None,
        poll_timeout_ms: float = DEFAULT_POLL_TIMEOUT_MS,
        initial_delay_ms: float = DEFAULT_INITIAL_DELAY_MS,
    ) -> None:
        if not is_http_url(api_url):
            msg = f"api_url must be an absolute http(s) URL, got {api_url!r}"
            raise ValidationError(msg, stage="client")

        self.credentials = _coerce_credentials(auth)
        self.api_url = str(api_url)
        self.session = Session(access_token=self.credentials.api_key)
        self.poll_timeout_ms = poll_timeout_ms
        self.initial_delay_ms = initial_delay_ms

        self._owns_http = http is None
        self._http = http or new_http_client()
        self._authenticator = authenticator or HttpAuthenticator(self._http)
        self._refresher = refresher or HttpTokenRefresher(self._http)
        self._submitter = submitter or HttpSubmitter(self._http)
        self._poller = poller or Poller(self._http, clock=clock)
        self._requester = requester or HttpSimpleRequester(self._http)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        auth: Credentials | Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> Client:
        """Build a client from a ``ClientConfig`` (see ``ClientConfig.from_env``)."""
        owns_http = "http" not in kwargs
        if owns_http:
            kwargs["http"] = new_http_client(config.http_timeout_s)
        client = cls(
            auth,
            config.api_url,
            poll_timeout_ms=config.poll_timeout_ms,
            initial_delay_ms=config.initial_delay_ms,
            **kwargs,
        )
        client._owns_http = owns_http
        return client

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    @property
    def access_token(self) -> str | None:
        return self.session.access_token

    @property
    def refresh_token(self) -> str | None:
        return self.session.refresh_token

    def ensure_logged_in(self) -> str:
        """Return the cached access token, logging in first if there is none.

        Raises:
            ClientError: Whatever the login collaborator raised, unmodified.
        """
        with self.session.lock:
            if not self.session.is_authenticated:
                logger.info("Logging in | api=%s | trial=%s", self.api_url, self.credentials.is_trial)
                self.session.store(self._authenticator.login(self.credentials, self.api_url))
            return self.session.access_token  # type: ignore[return-value]

    def logout(self) -> None:
        """Forget the cached tokens; the next call logs in again."""
        with self.session.lock:
            self.session.clear()

    def call_authenticated(self, operation: Callable[[str], T]) -> T:
        """Run *operation* with a valid access token, refreshing once on rejection.

        Args:
            operation: Callable taking the access token.

        Returns:
            Whatever *operation* returns.

        Raises:
            AuthorizationFailure: If the token was rejected and no refresh
                token is held, or the replay was rejected too.
            ClientError: Login, refresh or operation failures, unmodified.
        """
        token = self.ensure_logged_in()
        try:
            return operation(token)
        except AuthorizationFailure as exc:
            logger.warning(
                "Access token rejected, refreshing | stage=%s | status=%d",
                exc.stage,
                exc.status_code,
            )
            renewed = self._refresh_after(token)
            if renewed is None:
                raise

        return operation(renewed)

    def _refresh_after(self, rejected_token: str) -> str | None:
        """Renew the session once and return the new access token.

        Returns ``None`` when there is no refresh token to renew with.
        If another thread already replaced *rejected_token*, its token is
        reused without a second refresh.
        """
        with self.session.lock:
            current = self.session.access_token
            if current is not None and current != rejected_token:
                logger.info("Session already refreshed by a concurrent call")
                return current

            tokens = self.session.tokens()
            if tokens is None:
                logger.warning("No refresh token held; cannot renew session")
                return None

            self.session.store(self._refresher.refresh(tokens, self.api_url))
            logger.info("Session refreshed | api=%s", self.api_url)
            return self.session.access_token

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def analyze(
        self,
        data: Mapping[str, Any],
        *,
        timeout_ms: float | None = None,
        initial_delay_ms: float | None = None,
    ) -> Any:
        """Submit *data* for analysis and wait for the issues it produced.

        Args:
            data: Work payload, sent as the request's ``data`` field.
            timeout_ms: Analysis timeout sent to the service.  The poller
                also waits this long before its first status check.  The
                poll budget stays ``poll_timeout_ms``.
            initial_delay_ms: Wait before the first status check; overrides
                *timeout_ms* for that purpose.  Defaults to *timeout_ms*,
                then to the client's ``initial_delay_ms``.

        Returns:
            The issues payload, exactly as the service returned it.

        Raises:
            ValidationError: If *data* is empty.
            PollTimeout: If the job did not finish within the poll budget.
            ClientError: Any other collaborator failure, see the class policy.
        """
        if not data:
            msg = "analyze requires a non-empty data payload"
            raise ValidationError(msg, stage="analyze")

        payload: dict[str, Any] = {"data": dict(data)}
        if timeout_ms is not None:
            payload["timeout"] = int(timeout_ms)
        poll_timeout = self.poll_timeout_ms
        if initial_delay_ms is not None:
            poll_delay = initial_delay_ms
        elif timeout_ms is not None:
            poll_delay = timeout_ms
        else:
            poll_delay = self.initial_delay_ms

        def submit_then_poll(access_token: str) -> Any:
            job = self._submitter.submit(payload, access_token, self.api_url)
            return self._poller.poll(job.id, access_token, self.api_url, poll_timeout, poll_delay)

        return self.call_authenticated(submit_then_poll)

    def analyses(
        self,
        date_from: str,
        date_to: str | None = None,
        offset: int | None = None,
    ) -> Any:
        """List past analyses submitted by this user.

        Args:
            date_from: Start date (``YYYY-MM-DD``), required.
            date_to: Optional end date.
            offset: Optional paging offset.

        Raises:
            ValidationError: If *date_from* is missing.
        """
        if not date_from:
            msg = "analyses requires a date_from option"
            raise ValidationError(msg, stage="analyses")

        params: dict[str, Any] = {"dateFrom": date_from}
        if date_to is not None:
            params["dateTo"] = date_to
        if offset is not None:
            params["offset"] = offset
        url = build_url(self.api_url, ANALYSES_PATH, stage="analyses")

        return self.call_authenticated(
            lambda access_token: self._requester.request(
                url, access_token=access_token, params=params, json=True
            )
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Unauthenticated service queries
# ---------------------------------------------------------------------------


def api_version(
    api_url: str = DEFAULT_API_URL,
    *,
    requester: SimpleRequester | None = None,
) -> Any:
    """Return the service's version document (JSON)."""
    url = build_url(api_url, VERSION_PATH, stage="api_version")
    if requester is not None:
        return requester.request(url, json=True)
    with new_http_client() as http:
        return HttpSimpleRequester(http).request(url, json=True)


def openapi_spec(
    api_url: str = DEFAULT_API_URL,
    *,
    requester: SimpleRequester | None = None,
) -> str:
    """Return the service's OpenAPI document (YAML text)."""
    url = build_url(api_url, OPENAPI_PATH, stage="openapi_spec")
    if requester is not None:
        return requester.request(url)
    with new_http_client() as http:
        return HttpSimpleRequester(http).request(url)


def _coerce_credentials(auth: Credentials | Mapping[str, str] | None) -> Credentials:
    if auth is None:
        return Credentials()
    if isinstance(auth, Credentials):
        return auth
    try:
        return Credentials(**dict(auth))
    except TypeError as exc:
        msg = f"Unknown auth option: {exc}"
        raise ValidationError(msg, stage="credentials") from exc
