"""Domain models: session tokens, credentials, jobs and wire payloads."""

from analysis_client.models.jobs import JobHandle, JobState, PollState
from analysis_client.models.session import Credentials, Session, TokenPair

__all__ = [
    "Credentials",
    "JobHandle",
    "JobState",
    "PollState",
    "Session",
    "TokenPair",
]
