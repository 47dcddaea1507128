"""Credential and session models for the authenticated-call client.

- ``Credentials``: long-lived identity used by the login collaborator.
- ``TokenPair``: access/refresh pair produced by login or refresh.
- ``Session``: the mutable token cache owned by one ``Client``.

Design notes:
- ``Credentials`` and ``TokenPair`` are frozen dataclasses.
- ``Session`` mutation goes through ``store()``/``clear()`` under the
  session lock so concurrent threads never interleave a half-written
  pair.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from analysis_client.core.constants import TRIAL_USER_ID
from analysis_client.core.exceptions import ValidationError


@dataclass(frozen=True, slots=True)
class TokenPair:
    """Access and refresh tokens issued together by the service.

    Attributes:
        access: Short-lived bearer token.
        refresh: Longer-lived token used to mint a new pair.
    """

    access: str
    refresh: str

    def __repr__(self) -> str:
        return "TokenPair(access=***, refresh=***)"


@dataclass(frozen=True, slots=True)
class Credentials:
    """Identity used to log in.

    Exactly one way of authenticating applies:

    - ``api_key`` alone is used directly as the access token.
    - ``email``, ``eth_address`` or ``user_id`` plus ``password``.
    - ``user_id == TRIAL_USER_ID`` needs no password.
    - Nothing at all falls back to the trial user.

    Raises:
        ValidationError: If an identity is given without a password, or a
            password without an identity.
    """

    email: str | None = None
    eth_address: str | None = None
    user_id: str | None = None
    password: str | None = field(default=None, repr=False)
    api_key: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.api_key:
            return

        has_identity = bool(self.email or self.eth_address or self.user_id)
        if has_identity and not self.password and self.user_id != TRIAL_USER_ID:
            msg = "A password auth option is required when email, eth_address or user_id is given"
            raise ValidationError(msg, stage="credentials")

        if self.password and not has_identity:
            msg = "An email, eth_address or user_id auth option is required with a password"
            raise ValidationError(msg, stage="credentials")

        if not has_identity:
            object.__setattr__(self, "user_id", TRIAL_USER_ID)

    @property
    def is_trial(self) -> bool:
        """Return ``True`` when logging in as the trial user."""
        return self.user_id == TRIAL_USER_ID and not self.password

    def login_body(self) -> dict[str, str]:
        """Return the JSON body for the login endpoint."""
        body: dict[str, str] = {}
        if self.email:
            body["email"] = self.email
        if self.eth_address:
            body["ethAddress"] = self.eth_address
        if self.user_id:
            body["userId"] = self.user_id
        if self.password:
            body["password"] = self.password
        return body


class Session:
    """Current access and refresh tokens, or neither.

    Absence of ``access_token`` means "not yet authenticated".
    ``refresh_token`` is only ever set together with an access token from
    a successful login or refresh.

    ``lock`` serialises login/refresh read-modify-write cycles; it is never
    held while an authenticated call is in flight.
    """

    def __init__(self, access_token: str | None = None) -> None:
        self.access_token: str | None = access_token
        self.refresh_token: str | None = None
        self.lock = threading.Lock()

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    def store(self, tokens: TokenPair) -> None:
        """Replace both tokens with a freshly issued pair."""
        self.access_token = tokens.access
        self.refresh_token = tokens.refresh

    def tokens(self) -> TokenPair | None:
        """Return the current pair, or ``None`` if no refresh token is held."""
        if self.access_token is None or self.refresh_token is None:
            return None
        return TokenPair(access=self.access_token, refresh=self.refresh_token)

    def clear(self) -> None:
        self.access_token = None
        self.refresh_token = None
