"""Shared pytest fixtures for the analysis client test suite."""

from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest

from tests.fakes import FakeClock, ScriptedService


@pytest.fixture()
def clock() -> FakeClock:
    """Return a virtual clock starting at 0 ms."""
    return FakeClock()


@pytest.fixture()
def service(clock: FakeClock) -> ScriptedService:
    """Return an empty scripted service that timestamps requests with *clock*."""
    return ScriptedService(clock)


@pytest.fixture()
def http(service: ScriptedService) -> Iterator[httpx.Client]:
    """Return an ``httpx.Client`` routed to the scripted service."""
    with service.client() as client:
        yield client
