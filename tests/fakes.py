"""Fakes and shared constants for the analysis client test suite."""

from __future__ import annotations

from collections import defaultdict, deque
from typing import Any

import httpx

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

API_URL = "https://api.mythx.io"
JOB_ID = "my-uuid"
ACCESS_TOKEN = "valid-api-key"
STATUS_PATH = f"/v1/analyses/{JOB_ID}"
ISSUES_PATH = f"/v1/analyses/{JOB_ID}/issues"


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeClock:
    """Virtual clock: ``sleep_ms`` advances time instantly and is recorded."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now = start_ms
        self.sleeps: list[float] = []

    def now_ms(self) -> float:
        return self.now

    def sleep_ms(self, duration_ms: float) -> None:
        self.sleeps.append(duration_ms)
        self.now += duration_ms


class ScriptedService:
    """In-memory HTTP service for ``httpx.MockTransport``.

    Responses are queued per ``(method, path)`` and consumed in order.  An
    unscripted request fails the test, like an unmatched mock.
    """

    def __init__(self, clock: FakeClock | None = None) -> None:
        self._clock = clock
        self._routes: dict[tuple[str, str], deque[httpx.Response]] = defaultdict(deque)
        self.requests: list[httpx.Request] = []
        self.request_times: list[float] = []

    def add(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json: Any = None,
        text: str | None = None,
        times: int = 1,
    ) -> None:
        for _ in range(times):
            if text is not None:
                response = httpx.Response(status, text=text)
            elif json is not None:
                response = httpx.Response(status, json=json)
            else:
                response = httpx.Response(status)
            self._routes[(method, path)].append(response)

    def handler(self, request: httpx.Request) -> httpx.Response:
        key = (request.method, request.url.path)
        queue = self._routes.get(key)
        if not queue:
            msg = f"Unexpected request: {request.method} {request.url}"
            raise AssertionError(msg)
        self.requests.append(request)
        if self._clock is not None:
            self.request_times.append(self._clock.now_ms())
        return queue.popleft()

    def calls(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)

    def remaining(self, method: str, path: str) -> int:
        return len(self._routes.get((method, path), ()))

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


