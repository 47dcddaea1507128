"""Login collaborator: exchange credentials for a token pair over HTTP."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from analysis_client.api.base import Authenticator
from analysis_client.api.transport import new_http_client, parse_json, raise_for_outcome, send
from analysis_client.core.constants import LOGIN_PATH
from analysis_client.core.exceptions import ProtocolFailure
from analysis_client.models.payloads import LoginResponse
from analysis_client.models.session import TokenPair
from analysis_client.utils.helpers import build_url

if TYPE_CHECKING:
    import httpx

    from analysis_client.models.session import Credentials

logger = logging.getLogger(__name__)

_STAGE = "login"


class HttpAuthenticator(Authenticator):
    """``Authenticator`` backed by ``POST /v1/auth/login``.

    The service answers ``{"jwtTokens": {"access": ..., "refresh": ...}}``.
    """

    def __init__(self, http: httpx.Client | None = None) -> None:
        self._http = http or new_http_client()

    def login(self, credentials: Credentials, api_url: str) -> TokenPair:
        response = send(
            self._http,
            "POST",
            build_url(api_url, LOGIN_PATH, stage=_STAGE),
            stage=_STAGE,
            json_body=credentials.login_body(),
        )
        raise_for_outcome(response, stage=_STAGE)

        try:
            tokens = LoginResponse.model_validate(parse_json(response, stage=_STAGE)).jwt_tokens
        except PydanticValidationError as exc:
            msg = f"Malformed login response: {exc}"
            raise ProtocolFailure(msg, stage=_STAGE) from exc

        logger.info("Logged in | api=%s | trial=%s", api_url, credentials.is_trial)
        return TokenPair(access=tokens.access, refresh=tokens.refresh)
