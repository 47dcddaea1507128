"""Refresh collaborator: renew an expired token pair over HTTP.

``POST {api}/v1/auth/refresh`` with ``{accessToken, refreshToken}``.  Only
a 200 carrying both renewed tokens counts as success.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from analysis_client.api.base import TokenRefresher
from analysis_client.api.outcome import AUTH_STATUS_CODES
from analysis_client.api.transport import new_http_client, parse_json, send
from analysis_client.core.constants import REFRESH_PATH
from analysis_client.core.exceptions import (
    AuthorizationFailure,
    ProtocolFailure,
    UpstreamHttpFailure,
)
from analysis_client.models.payloads import RefreshRequest, RefreshResponse
from analysis_client.models.session import TokenPair
from analysis_client.utils.helpers import build_url

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

_STAGE = "refresh"


class HttpTokenRefresher(TokenRefresher):
    """``TokenRefresher`` backed by the service's refresh endpoint."""

    def __init__(self, http: httpx.Client | None = None) -> None:
        self._http = http or new_http_client()

    def refresh(self, tokens: TokenPair, api_url: str) -> TokenPair:
        """Exchange *tokens* for a renewed pair.

        Raises:
            ConnectionFailure: If the service cannot be reached or
                *api_url* is unusable.
            AuthorizationFailure: If the service rejects the pair (401/403).
            UpstreamHttpFailure: For any other status other than 200.
            ProtocolFailure: If the body is not JSON or lacks a token.
        """
        body = RefreshRequest(access_token=tokens.access, refresh_token=tokens.refresh)
        response = send(
            self._http,
            "POST",
            build_url(api_url, REFRESH_PATH, stage=_STAGE),
            stage=_STAGE,
            json_body=body.model_dump(by_alias=True),
        )

        if response.status_code != 200:
            msg = f"Invalid status code: {response.status_code}"
            if response.status_code in AUTH_STATUS_CODES:
                raise AuthorizationFailure(
                    msg,
                    status_code=response.status_code,
                    access_token=tokens.access,
                    stage=_STAGE,
                )
            raise UpstreamHttpFailure(msg, status_code=response.status_code, stage=_STAGE)

        payload = parse_json(response, stage=_STAGE)
        if not isinstance(payload, dict):
            msg = "JSON parse error: expected an object"
            raise ProtocolFailure(msg, stage=_STAGE)

        try:
            renewed = RefreshResponse.model_validate(payload)
        except PydanticValidationError as exc:
            msg = f"Malformed refresh response: {exc}"
            raise ProtocolFailure(msg, stage=_STAGE) from exc
        if not renewed.access_token:
            raise ProtocolFailure("Access Token missing", stage=_STAGE)
        if not renewed.refresh_token:
            raise ProtocolFailure("Refresh Token missing", stage=_STAGE)

        logger.info("Token pair refreshed | api=%s", api_url)
        return TokenPair(access=renewed.access_token, refresh=renewed.refresh_token)
