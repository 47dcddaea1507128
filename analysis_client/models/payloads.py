"""Pydantic schemas for the analysis service wire format.

Request bodies are dumped ``by_alias`` so Python field names stay
snake_case while the service sees camelCase.  Response models ignore
unknown keys; the issues payload is never modelled because the client
passes it through verbatim.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class SubmitRequest(_WireModel):
    """Body of ``POST /v1/analyses``.

    Attributes:
        data: Work payload, forwarded untouched.
        timeout: Optional server-side analysis timeout in milliseconds.
    """

    data: dict[str, Any]
    timeout: int | None = None


class RefreshRequest(_WireModel):
    """Body of ``POST /v1/auth/refresh``."""

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class SubmitResponse(_WireModel):
    """Body returned by ``POST /v1/analyses``; only ``uuid`` is used."""

    uuid: str


class AnalysisStatus(_WireModel):
    """Body returned by ``GET /v1/analyses/{uuid}``."""

    status: str


class RefreshResponse(_WireModel):
    """Body returned by ``POST /v1/auth/refresh``.

    Both fields are optional here so the refresh collaborator can name the
    missing one in its error message.
    """

    access_token: str | None = Field(default=None, alias="accessToken")
    refresh_token: str | None = Field(default=None, alias="refreshToken")


class JwtTokens(_WireModel):
    access: str
    refresh: str


class LoginResponse(_WireModel):
    """Body returned by ``POST /v1/auth/login``."""

    jwt_tokens: JwtTokens = Field(alias="jwtTokens")


class ErrorBody(_WireModel):
    """Error document the service attaches to most non-2xx responses."""

    error: str = ""
