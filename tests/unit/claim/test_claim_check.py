"""Tests for the per-request guard check."""

from datetime import timedelta

import pytest

from solosession.core.modules.session.models import SessionState
from solosession.errors import (
    AuthenticationError,
    RejectionKind,
    SessionExpiredError,
    SessionInvalidatedError,
    SupersededElsewhereError,
)


class TestUnauthenticated:
    async def test_no_username(self, claim):
        with pytest.raises(AuthenticationError) as exc_info:
            await claim.check("some-id", None)
        assert exc_info.value.kind == RejectionKind.UNAUTHENTICATED
        assert not exc_info.value.terminates_session

    async def test_no_session_ever_created(self, claim):
        with pytest.raises(AuthenticationError) as exc_info:
            await claim.check(None, None)
        assert exc_info.value.kind == RejectionKind.UNAUTHENTICATED

    async def test_unknown_account(self, claim):
        with pytest.raises(AuthenticationError) as exc_info:
            await claim.check("some-id", "bob")
        assert exc_info.value.kind == RejectionKind.UNAUTHENTICATED


class TestClaimedSession:
    async def test_current_claim_allowed(self, claim):
        result = await claim.login("alice", "wonderland")
        account = await claim.check(result.session_id, "alice")
        assert account.username == "alice"
        assert account.session_id == result.session_id

    async def test_unclaimed_account_invalidates_session(self, claim, accounts, sessions):
        result = await claim.login("alice", "wonderland")
        await accounts.clear_claim("alice")

        with pytest.raises(SessionInvalidatedError) as exc_info:
            await claim.check(result.session_id, "alice")

        assert exc_info.value.terminates_session
        assert result.session_id not in sessions.records

    async def test_previous_session_rejected_after_new_login(self, claim, accounts, sessions):
        first = await claim.login("alice", "wonderland")
        second = await claim.login("alice", "wonderland")

        with pytest.raises(SupersededElsewhereError) as exc_info:
            await claim.check(first.session_id, "alice")

        assert exc_info.value.kind == RejectionKind.SUPERSEDED_ELSEWHERE
        assert accounts.claim_of("alice") == second.session_id
        await claim.check(second.session_id, "alice")

    async def test_superseded_check_destroys_only_callers_session(self, claim, sessions):
        second = await claim.login("alice", "wonderland")
        await sessions.upsert("orphan", SessionState(username="alice"), timedelta(hours=1))

        with pytest.raises(SupersededElsewhereError):
            await claim.check("orphan", "alice")

        assert "orphan" not in sessions.records
        assert second.session_id in sessions.records


class TestExpiry:
    async def test_expired_session_clears_claim(self, claim, accounts, sessions):
        result = await claim.login("alice", "wonderland")
        sessions.expire(result.session_id)

        with pytest.raises(SessionExpiredError) as exc_info:
            await claim.check(result.session_id, "alice")

        assert exc_info.value.terminates_session
        assert accounts.claim_of("alice") is None

    async def test_login_after_expiry_needs_no_cleanup(self, claim, accounts, sessions):
        result = await claim.login("alice", "wonderland")
        sessions.expire(result.session_id)
        with pytest.raises(SessionExpiredError):
            await claim.check(result.session_id, "alice")

        fresh = await claim.login("alice", "wonderland")

        assert accounts.claim_of("alice") == fresh.session_id
        await claim.check(fresh.session_id, "alice")

    async def test_second_check_after_expiry_sees_unclaimed_account(self, claim, sessions):
        result = await claim.login("alice", "wonderland")
        sessions.expire(result.session_id)
        with pytest.raises(SessionExpiredError):
            await claim.check(result.session_id, "alice")

        with pytest.raises(SessionInvalidatedError):
            await claim.check(result.session_id, "alice")
