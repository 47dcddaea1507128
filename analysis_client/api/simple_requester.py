"""Simple requester: one GET, optionally authenticated, JSON or text."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from analysis_client.api.base import SimpleRequester
from analysis_client.api.transport import new_http_client, parse_json, raise_for_outcome, send
from analysis_client.utils.helpers import bearer_headers

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

_STAGE = "request"


class HttpSimpleRequester(SimpleRequester):
    """``SimpleRequester`` backed by ``httpx``."""

    def __init__(self, http: httpx.Client | None = None) -> None:
        self._http = http or new_http_client()

    def request(
        self,
        url: str,
        *,
        access_token: str | None = None,
        params: dict[str, Any] | None = None,
        json: bool = False,
    ) -> Any:
        headers = bearer_headers(access_token) if access_token else None
        response = send(self._http, "GET", url, stage=_STAGE, headers=headers, params=params)
        raise_for_outcome(
            response,
            stage=_STAGE,
            access_token=access_token,
            failure_message=f"Request to {url} failed, HTTP status code: {response.status_code}",
        )

        logger.debug("GET %s | status=%d", url, response.status_code)
        if json:
            return parse_json(response, stage=_STAGE)
        return response.text
