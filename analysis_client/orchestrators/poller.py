"""Poller: wait for a submitted analysis job and fetch its issues.

The poller turns an asynchronous remote job into a blocking call with
deterministic bounds:

1. Wait ``initial_delay_ms`` (the job is known to need at least that long).
2. Check the job status.  ``Finished`` → fetch and return the issues;
   ``Error`` → ``RemoteJobFailure``; anything else → back off.
3. Back off ``min(step, time left)`` where ``step`` starts at 1 s and
   doubles after every check.  The clamp lands the last check exactly on
   the deadline, and that check still counts.
4. Stop with ``PollTimeout`` when ``timeout_ms`` has elapsed since the
   call started (the initial delay counts against it), or after
   ``max_polls`` checks, whichever comes first.  The first status check
   always runs, even when the initial delay used up the whole budget.

``max_polls`` (default ``MAX_POLLS`` = 10) is a hard ceiling that does not
scale with the timeout: an hour-long timeout still gets at most ten
checks, spaced further and further apart.  Callers needing more checks
pass a larger ``max_polls``.

Any non-2xx status or result response fails immediately.  401/403/404
become ``AuthorizationFailure`` so the client can refresh its token; the
poller itself never retries past its own bounds.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from analysis_client.api.outcome import ANALYSIS_AUTH_STATUS_CODES
from analysis_client.api.transport import new_http_client, parse_json, raise_for_outcome, send
from analysis_client.core.clock import SystemClock
from analysis_client.core.constants import (
    ANALYSES_PATH,
    DEFAULT_INITIAL_DELAY_MS,
    DEFAULT_POLL_TIMEOUT_MS,
    MAX_POLLS,
)
from analysis_client.core.exceptions import (
    PollTimeout,
    ProtocolFailure,
    RemoteJobFailure,
    ValidationError,
)
from analysis_client.models.jobs import JobState, PollState
from analysis_client.models.payloads import AnalysisStatus
from analysis_client.utils.helpers import bearer_headers, build_url

if TYPE_CHECKING:
    import httpx

    from analysis_client.core.clock import Clock

logger = logging.getLogger(__name__)

_STAGE = "poll"


class Poller:
    """Bounded exponential-backoff poller for one analysis job per call.

    Args:
        http: HTTP client used for status and result fetches.
        clock: Time source and delay; defaults to ``SystemClock``.
        max_polls: Maximum status checks per ``poll`` call.
    """

    def __init__(
        self,
        http: httpx.Client | None = None,
        *,
        clock: Clock | None = None,
        max_polls: int = MAX_POLLS,
    ) -> None:
        if max_polls < 1:
            msg = f"max_polls must be >= 1, got {max_polls}"
            raise ValidationError(msg, stage=_STAGE)
        self._http = http or new_http_client()
        self._clock = clock or SystemClock()
        self.max_polls = max_polls

    def poll(
        self,
        job_id: str,
        access_token: str,
        api_url: str,
        timeout_ms: float = DEFAULT_POLL_TIMEOUT_MS,
        initial_delay_ms: float = DEFAULT_INITIAL_DELAY_MS,
    ) -> Any:
        """Wait for *job_id* to finish and return its issues payload.

        Args:
            job_id: Identifier returned by the submit collaborator.
            access_token: Bearer token for the status and result requests.
            api_url: Service base URL.
            timeout_ms: Total budget in milliseconds, initial delay included.
            initial_delay_ms: Wait before the first status check.

        Returns:
            The result endpoint's JSON body, unmodified.

        Raises:
            RemoteJobFailure: If the job ends in the ``Error`` state.
            PollTimeout: If the time or check budget runs out first.
            AuthorizationFailure: On 401/403/404 from either endpoint.
            UpstreamHttpFailure: On any other non-2xx response.
            ProtocolFailure: If a response body is not the expected JSON.
            ConnectionFailure: If the service cannot be reached.
        """
        if timeout_ms <= 0:
            msg = f"timeout_ms must be > 0, got {timeout_ms}"
            raise ValidationError(msg, stage=_STAGE)
        if initial_delay_ms < 0:
            msg = f"initial_delay_ms must be >= 0, got {initial_delay_ms}"
            raise ValidationError(msg, stage=_STAGE)

        logger.info(
            "poll started | job_id=%s | timeout_ms=%d | initial_delay_ms=%d | max_polls=%d",
            job_id,
            timeout_ms,
            initial_delay_ms,
            self.max_polls,
        )

        state = PollState(started_at_ms=self._clock.now_ms(), timeout_ms=timeout_ms)
        self._clock.sleep_ms(initial_delay_ms)

        while True:
            job_state = self.fetch_status(job_id, access_token, api_url)
            state.polls += 1

            logger.debug(
                "poll check | job_id=%s | state=%s | poll_count=%d",
                job_id,
                job_state.value,
                state.polls,
            )

            if job_state.is_terminal:
                if job_state is JobState.ERROR:
                    logger.warning(
                        "poll failed | job_id=%s | poll_count=%d", job_id, state.polls
                    )
                    raise RemoteJobFailure(job_id)

                issues = self.fetch_issues(job_id, access_token, api_url)
                logger.info(
                    "poll completed | job_id=%s | poll_count=%d | elapsed_ms=%.0f",
                    job_id,
                    state.polls,
                    state.elapsed_ms(self._clock.now_ms()),
                )
                return issues

            now = self._clock.now_ms()
            if state.polls >= self.max_polls or state.remaining_ms(now) <= 0:
                break
            self._clock.sleep_ms(state.next_delay_ms(now))

        elapsed_s = state.elapsed_ms(self._clock.now_ms()) / 1000.0
        logger.warning(
            "poll timeout | job_id=%s | timeout_ms=%d | poll_count=%d | elapsed_s=%.1f",
            job_id,
            timeout_ms,
            state.polls,
            elapsed_s,
        )
        raise PollTimeout(job_id, elapsed_s=round(elapsed_s, 3), polls=state.polls)

    def fetch_status(self, job_id: str, access_token: str, api_url: str) -> JobState:
        """Return the current ``JobState`` of *job_id*."""
        response = self._get(f"{ANALYSES_PATH}/{job_id}", job_id, access_token, api_url)
        try:
            status = AnalysisStatus.model_validate(parse_json(response, stage=_STAGE)).status
        except PydanticValidationError as exc:
            msg = f"Malformed status response for job {job_id}: {exc}"
            raise ProtocolFailure(msg, stage=_STAGE) from exc
        return JobState.from_status(status)

    def fetch_issues(self, job_id: str, access_token: str, api_url: str) -> Any:
        """Return the issues payload of a finished job, verbatim."""
        response = self._get(f"{ANALYSES_PATH}/{job_id}/issues", job_id, access_token, api_url)
        return parse_json(response, stage=_STAGE)

    def _get(self, path: str, job_id: str, access_token: str, api_url: str) -> httpx.Response:
        response = send(
            self._http,
            "GET",
            build_url(api_url, path, stage=_STAGE),
            stage=_STAGE,
            headers=bearer_headers(access_token),
        )
        raise_for_outcome(
            response,
            stage=_STAGE,
            access_token=access_token,
            auth_codes=ANALYSIS_AUTH_STATUS_CODES,
            failure_message=(
                "Failed in retrieving analysis response, "
                f"HTTP status code: {response.status_code}. Job id: {job_id}"
            ),
        )
        return response
