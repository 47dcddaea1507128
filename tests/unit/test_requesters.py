"""Tests for the login, submit and simple-request HTTP collaborators."""

from __future__ import annotations

import json

import httpx
import pytest

from analysis_client.api.login import HttpAuthenticator
from analysis_client.api.requester import HttpSubmitter
from analysis_client.api.simple_requester import HttpSimpleRequester
from analysis_client.core.exceptions import (
    AuthorizationFailure,
    ConnectionFailure,
    ProtocolFailure,
    UpstreamHttpFailure,
)
from analysis_client.models.jobs import JobHandle
from analysis_client.models.session import Credentials, TokenPair
from tests.fakes import ACCESS_TOKEN, API_URL, ScriptedService

LOGIN_PATH = "/v1/auth/login"
ANALYSES_PATH = "/v1/analyses"


class TestHttpAuthenticator:
    def test_login_returns_token_pair(
        self, http: httpx.Client, service: ScriptedService
    ) -> None:
        service.add(
            "POST",
            LOGIN_PATH,
            json={"jwtTokens": {"access": "access-token", "refresh": "refresh-token"}},
        )
        credentials = Credentials(email="user@example.com", password="my-password")

        tokens = HttpAuthenticator(http).login(credentials, API_URL)

        assert tokens == TokenPair(access="access-token", refresh="refresh-token")
        assert json.loads(service.requests[0].content) == {
            "email": "user@example.com",
            "password": "my-password",
        }

    def test_login_rejected(self, http: httpx.Client, service: ScriptedService) -> None:
        service.add("POST", LOGIN_PATH, status=401, json={"error": "Wrong password"})
        credentials = Credentials(user_id="123456", password="bad")

        with pytest.raises(AuthorizationFailure, match="Wrong password"):
            HttpAuthenticator(http).login(credentials, API_URL)

    def test_login_malformed_body(self, http: httpx.Client, service: ScriptedService) -> None:
        service.add("POST", LOGIN_PATH, json={"access": "a", "refresh": "r"})

        with pytest.raises(ProtocolFailure, match="Malformed login response"):
            HttpAuthenticator(http).login(Credentials(), API_URL)


class TestHttpSubmitter:
    def test_unparseable_api_url(self, http: httpx.Client, service: ScriptedService) -> None:
        with pytest.raises(ConnectionFailure):
            HttpSubmitter(http).submit({"data": {"x": 1}}, ACCESS_TOKEN, "http://[::1")

        assert service.requests == []

    def test_submit_returns_job_handle(
        self, http: httpx.Client, service: ScriptedService
    ) -> None:
        service.add("POST", ANALYSES_PATH, json={"uuid": "analysis-uuid", "status": "Queued"})
        payload = {"data": {"deployedBytecode": "my-bytecode"}, "timeout": 10}

        job = HttpSubmitter(http).submit(payload, ACCESS_TOKEN, API_URL)

        assert job == JobHandle(id="analysis-uuid")
        request = service.requests[0]
        assert request.headers["Authorization"] == f"Bearer {ACCESS_TOKEN}"
        assert json.loads(request.content) == payload

    def test_submit_omits_missing_timeout(
        self, http: httpx.Client, service: ScriptedService
    ) -> None:
        service.add("POST", ANALYSES_PATH, json={"uuid": "analysis-uuid"})

        HttpSubmitter(http).submit({"data": {"x": 1}}, ACCESS_TOKEN, API_URL)

        assert json.loads(service.requests[0].content) == {"data": {"x": 1}}

    def test_submit_unauthorized(self, http: httpx.Client, service: ScriptedService) -> None:
        service.add("POST", ANALYSES_PATH, status=401)

        with pytest.raises(AuthorizationFailure) as exc_info:
            HttpSubmitter(http).submit({"data": {"x": 1}}, ACCESS_TOKEN, API_URL)

        assert exc_info.value.access_token == ACCESS_TOKEN

    def test_submit_server_error(self, http: httpx.Client, service: ScriptedService) -> None:
        service.add("POST", ANALYSES_PATH, status=503)

        with pytest.raises(UpstreamHttpFailure, match="503"):
            HttpSubmitter(http).submit({"data": {"x": 1}}, ACCESS_TOKEN, API_URL)

    def test_submit_rejects_payload_without_data(self, http: httpx.Client) -> None:
        with pytest.raises(ProtocolFailure, match="Invalid analysis payload"):
            HttpSubmitter(http).submit({"bytecode": "0x"}, ACCESS_TOKEN, API_URL)

    def test_submit_response_without_uuid(
        self, http: httpx.Client, service: ScriptedService
    ) -> None:
        service.add("POST", ANALYSES_PATH, json={"status": "Queued"})

        with pytest.raises(ProtocolFailure, match="Malformed submit response"):
            HttpSubmitter(http).submit({"data": {"x": 1}}, ACCESS_TOKEN, API_URL)


class TestHttpSimpleRequester:
    def test_json_request_with_token(self, http: httpx.Client, service: ScriptedService) -> None:
        service.add("GET", ANALYSES_PATH, json=["analysis1", "analysis2"])

        result = HttpSimpleRequester(http).request(
            f"{API_URL}{ANALYSES_PATH}",
            access_token=ACCESS_TOKEN,
            params={"dateFrom": "2018-11-24", "offset": 5},
            json=True,
        )

        assert result == ["analysis1", "analysis2"]
        request = service.requests[0]
        assert request.headers["Authorization"] == f"Bearer {ACCESS_TOKEN}"
        assert request.url.params["dateFrom"] == "2018-11-24"
        assert request.url.params["offset"] == "5"

    def test_text_request_without_token(
        self, http: httpx.Client, service: ScriptedService
    ) -> None:
        service.add("GET", "/v1/openapi.yaml", text="openapi: 3.0.0\n")

        result = HttpSimpleRequester(http).request(f"{API_URL}/v1/openapi.yaml")

        assert result == "openapi: 3.0.0\n"
        assert "Authorization" not in service.requests[0].headers

    def test_unauthorized(self, http: httpx.Client, service: ScriptedService) -> None:
        service.add("GET", ANALYSES_PATH, status=403)

        with pytest.raises(AuthorizationFailure):
            HttpSimpleRequester(http).request(
                f"{API_URL}{ANALYSES_PATH}", access_token=ACCESS_TOKEN, json=True
            )

    def test_not_found_is_upstream_failure(
        self, http: httpx.Client, service: ScriptedService
    ) -> None:
        service.add("GET", "/v1/version", status=404)

        with pytest.raises(UpstreamHttpFailure) as exc_info:
            HttpSimpleRequester(http).request(f"{API_URL}/v1/version", json=True)

        assert exc_info.value.status_code == 404
