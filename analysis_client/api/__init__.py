"""Service collaborators.

Defines the interfaces the client depends on and their ``httpx``
implementations:
- Authenticator / HttpAuthenticator: credentials → token pair
- TokenRefresher / HttpTokenRefresher: expired pair → renewed pair
- Submitter / HttpSubmitter: work payload → job handle
- SimpleRequester / HttpSimpleRequester: one-shot GET
"""

from analysis_client.api.base import (
    Authenticator,
    SimpleRequester,
    Submitter,
    TokenRefresher,
)
from analysis_client.api.login import HttpAuthenticator
from analysis_client.api.outcome import Outcome, OutcomeKind, classify
from analysis_client.api.refresh import HttpTokenRefresher
from analysis_client.api.requester import HttpSubmitter
from analysis_client.api.simple_requester import HttpSimpleRequester

__all__ = [
    "Authenticator",
    "HttpAuthenticator",
    "HttpSimpleRequester",
    "HttpSubmitter",
    "HttpTokenRefresher",
    "Outcome",
    "OutcomeKind",
    "SimpleRequester",
    "Submitter",
    "TokenRefresher",
    "classify",
]
