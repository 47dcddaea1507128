"""Shared URL and header helpers used by the collaborators and the client."""

from __future__ import annotations

import httpx

from analysis_client.core.exceptions import ConnectionFailure


def is_http_url(value: object) -> bool:
    """Return ``True`` if *value* is an absolute ``http``/``https`` URL."""
    if not isinstance(value, str | httpx.URL):
        return False
    try:
        url = httpx.URL(str(value))
    except httpx.InvalidURL:
        return False
    return url.scheme in ("http", "https") and bool(url.host)


def api_origin(api_url: str | httpx.URL) -> str:
    """Return ``scheme://host[:port]`` for *api_url*, dropping any path.

    Args:
        api_url: Service base URL, with or without a trailing path.

    Raises:
        httpx.InvalidURL: If *api_url* cannot be parsed.
    """
    url = httpx.URL(str(api_url))
    if not url.scheme:
        return ""
    return f"{url.scheme}://{url.netloc.decode('ascii')}"


def build_url(api_url: str | httpx.URL, path: str, *, stage: str = "") -> str:
    """Join the origin of *api_url* with an absolute API *path*.

    Raises:
        ConnectionFailure: If *api_url* cannot be parsed at all.
    """
    try:
        origin = api_origin(api_url)
    except httpx.InvalidURL as exc:
        msg = f"Invalid API URL: {str(api_url)!r}: {exc}"
        raise ConnectionFailure(msg, stage=stage) from exc
    return f"{origin}{path}"


def bearer_headers(access_token: str) -> dict[str, str]:
    """Return the ``Authorization`` header for a bearer token."""
    return {"Authorization": f"Bearer {access_token}"}
