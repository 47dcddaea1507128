"""Tests for session, credential and job models."""

from __future__ import annotations

import pytest

from analysis_client.core.constants import TRIAL_USER_ID
from analysis_client.core.exceptions import ValidationError
from analysis_client.models.jobs import JobState, PollState
from analysis_client.models.session import Credentials, Session, TokenPair


class TestCredentials:
    def test_no_auth_is_trial_user(self) -> None:
        creds = Credentials()
        assert creds.user_id == TRIAL_USER_ID
        assert creds.is_trial
        assert creds.login_body() == {"userId": TRIAL_USER_ID}

    def test_login_body_uses_wire_names(self) -> None:
        creds = Credentials(eth_address="0xabc", password="pw")
        assert creds.login_body() == {"ethAddress": "0xabc", "password": "pw"}

    def test_api_key_skips_identity_checks(self) -> None:
        creds = Credentials(api_key="key")
        assert creds.user_id is None
        assert not creds.is_trial

    def test_identity_without_password_rejected(self) -> None:
        with pytest.raises(ValidationError, match="password"):
            Credentials(email="user@example.com")

    def test_password_without_identity_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Credentials(password="pw")

    def test_repr_hides_secrets(self) -> None:
        text = repr(Credentials(email="a@b.c", password="secret", api_key="k"))
        assert "secret" not in text
        assert "api_key" not in text

    def test_token_pair_repr_hides_tokens(self) -> None:
        assert "abc" not in repr(TokenPair(access="abc", refresh="abc"))


class TestSession:
    def test_starts_unauthenticated(self) -> None:
        session = Session()
        assert not session.is_authenticated
        assert session.tokens() is None

    def test_api_key_session_has_no_pair(self) -> None:
        session = Session(access_token="key")
        assert session.is_authenticated
        assert session.tokens() is None

    def test_store_and_clear(self) -> None:
        session = Session()
        session.store(TokenPair(access="a", refresh="r"))
        assert session.tokens() == TokenPair(access="a", refresh="r")

        session.clear()
        assert session.access_token is None
        assert session.refresh_token is None


class TestJobState:
    @pytest.mark.parametrize(
        ("status", "state"),
        [
            ("Finished", JobState.FINISHED),
            ("Error", JobState.ERROR),
            ("Queued", JobState.IN_PROGRESS),
            ("In progress", JobState.IN_PROGRESS),
            ("finished", JobState.IN_PROGRESS),
        ],
    )
    def test_from_status(self, status: str, state: JobState) -> None:
        assert JobState.from_status(status) is state

    def test_terminal_states(self) -> None:
        assert JobState.FINISHED.is_terminal
        assert JobState.ERROR.is_terminal
        assert not JobState.IN_PROGRESS.is_terminal


class TestPollState:
    def test_step_doubles(self) -> None:
        state = PollState(started_at_ms=0, timeout_ms=100_000)
        assert [state.next_delay_ms(0) for _ in range(4)] == [1000, 2000, 4000, 8000]

    def test_delay_clamped_to_remaining(self) -> None:
        state = PollState(started_at_ms=0, timeout_ms=10_000, step_ms=8000)
        assert state.next_delay_ms(7000) == 3000

    def test_delay_never_negative(self) -> None:
        state = PollState(started_at_ms=0, timeout_ms=1000)
        assert state.next_delay_ms(5000) == 0

    def test_elapsed_and_remaining(self) -> None:
        state = PollState(started_at_ms=500, timeout_ms=1000)
        assert state.elapsed_ms(1200) == 700
        assert state.remaining_ms(1200) == 300
