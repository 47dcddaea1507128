"""Submit collaborator: post a work payload and return its job handle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from analysis_client.api.base import Submitter
from analysis_client.api.transport import new_http_client, parse_json, raise_for_outcome, send
from analysis_client.core.constants import ANALYSES_PATH
from analysis_client.core.exceptions import ProtocolFailure
from analysis_client.models.jobs import JobHandle
from analysis_client.models.payloads import SubmitRequest, SubmitResponse
from analysis_client.utils.helpers import bearer_headers, build_url

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

_STAGE = "submit"


class HttpSubmitter(Submitter):
    """``Submitter`` backed by ``POST /v1/analyses``.

    *payload* is ``{"data": {...}}`` with an optional ``"timeout"`` in
    milliseconds that the service applies to the analysis itself.
    """

    def __init__(self, http: httpx.Client | None = None) -> None:
        self._http = http or new_http_client()

    def submit(
        self,
        payload: dict[str, Any],
        access_token: str,
        api_url: str,
    ) -> JobHandle:
        try:
            body = SubmitRequest.model_validate(payload)
        except PydanticValidationError as exc:
            msg = f"Invalid analysis payload: {exc}"
            raise ProtocolFailure(msg, stage=_STAGE) from exc

        response = send(
            self._http,
            "POST",
            build_url(api_url, ANALYSES_PATH, stage=_STAGE),
            stage=_STAGE,
            headers=bearer_headers(access_token),
            json_body=body.model_dump(exclude_none=True),
        )
        raise_for_outcome(
            response,
            stage=_STAGE,
            access_token=access_token,
            failure_message=f"Failed to submit analysis, HTTP status code: {response.status_code}",
        )

        try:
            job_id = SubmitResponse.model_validate(parse_json(response, stage=_STAGE)).uuid
        except PydanticValidationError as exc:
            msg = f"Malformed submit response: {exc}"
            raise ProtocolFailure(msg, stage=_STAGE) from exc

        logger.info("Analysis submitted | job_id=%s", job_id)
        return JobHandle(id=job_id)
