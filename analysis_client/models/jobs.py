"""Typed models for submitted analysis jobs and their polling.

- ``JobHandle``: opaque identifier returned by the submit collaborator.
- ``JobState``: terminal / non-terminal classification of a status string.
- ``PollState``: per-call bookkeeping for one ``Poller.poll`` invocation.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from analysis_client.core.constants import INITIAL_POLL_STEP_MS


class JobState(enum.Enum):
    """Lifecycle state of a remote analysis job.

    Values:
        FINISHED:    Terminal success; the result can be fetched.
        ERROR:       Terminal failure; no result will follow.
        IN_PROGRESS: Any other status reported by the service.
    """

    FINISHED = "Finished"
    ERROR = "Error"
    IN_PROGRESS = "In progress"

    @classmethod
    def from_status(cls, status: str) -> JobState:
        """Map a raw service status string onto a ``JobState``."""
        if status == cls.FINISHED.value:
            return cls.FINISHED
        if status == cls.ERROR.value:
            return cls.ERROR
        return cls.IN_PROGRESS

    @property
    def is_terminal(self) -> bool:
        return self is not JobState.IN_PROGRESS


@dataclass(frozen=True, slots=True)
class JobHandle:
    """Opaque identifier for one submitted analysis job.

    Attributes:
        id: Service-assigned job identifier (a UUID for the default service).
    """

    id: str


@dataclass(slots=True)
class PollState:
    """Transient state of one poll loop; recreated on every call.

    Attributes:
        started_at_ms: Clock reading when the loop started.
        timeout_ms: Total budget measured from ``started_at_ms``.
        polls: Status checks performed so far.
        step_ms: Next backoff step before clamping.
    """

    started_at_ms: float
    timeout_ms: float
    polls: int = 0
    step_ms: float = INITIAL_POLL_STEP_MS

    def elapsed_ms(self, now_ms: float) -> float:
        return now_ms - self.started_at_ms

    def remaining_ms(self, now_ms: float) -> float:
        return self.started_at_ms + self.timeout_ms - now_ms

    def next_delay_ms(self, now_ms: float) -> float:
        """Return the clamped backoff wait and double the step for next time."""
        delay = max(0.0, min(self.step_ms, self.remaining_ms(now_ms)))
        self.step_ms *= 2
        return delay
