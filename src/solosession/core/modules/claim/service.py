"""Single-session claim protocol.

An account is owned by at most one session: ``Account.session_id``. Login
evicts the previous owner, clears the claim and then re-claims it for a fresh
session id with a conditional update that only succeeds while the claim is
still empty. Between the clear and the re-claim a concurrent login can win the
slot; the loser gets SessionClaimLostError and has to log in again.
"""

from datetime import timedelta
from typing import Protocol

import structlog

from solosession.core.modules.account.models import Account
from solosession.core.modules.session.models import LoginResult, SessionRecord, SessionState
from solosession.errors import (
    AuthenticationError,
    InvalidCredentialsError,
    SessionClaimLostError,
    SessionExpiredError,
    SessionInvalidatedError,
    SupersededElsewhereError,
)

logger = structlog.get_logger(__name__)


class AccountDirectory(Protocol):
    async def find_by_username(self, username: str) -> Account | None: ...

    def verify_credentials(self, account: Account, password: str) -> bool: ...

    async def clear_claim(self, username: str) -> None: ...

    async def conditional_claim(self, username: str, session_id: str) -> int: ...

    async def release_claim(self, username: str, session_id: str) -> int: ...


class SessionStore(Protocol):
    def new_session_id(self) -> str: ...

    async def get(self, session_id: str) -> SessionRecord | None: ...

    async def upsert(self, session_id: str, state: SessionState, ttl: timedelta) -> SessionRecord: ...

    async def destroy(self, session_id: str) -> bool: ...


class ClaimService:
    """Login, guard-check and logout against an account directory and a session store."""

    def __init__(self, accounts: AccountDirectory, sessions: SessionStore, session_ttl: timedelta) -> None:
        self._accounts = accounts
        self._sessions = sessions
        self._session_ttl = session_ttl

    async def login(self, username: str, password: str) -> LoginResult:
        """Authenticate and claim the account for a brand-new session, evicting any previous one."""
        account = await self._accounts.find_by_username(username)
        if account is None or not self._accounts.verify_credentials(account, password):
            raise InvalidCredentialsError

        if account.session_id is not None:
            await self._evict(account.username, account.session_id)

        session_id = self._sessions.new_session_id()
        if await self._accounts.conditional_claim(account.username, session_id) == 0:
            logger.info("session_claim_lost", username=account.username)
            raise SessionClaimLostError

        record = await self._sessions.upsert(session_id, SessionState(username=account.username), self._session_ttl)
        logger.debug("login_succeeded", username=account.username)
        return LoginResult(username=account.username, session_id=session_id, expires_at=record.expires_at)

    async def check(self, session_id: str | None, username: str | None) -> Account:
        """Return the account if session_id is its current claim, raise a tagged AuthenticationError otherwise."""
        if not username or not session_id:
            raise AuthenticationError

        account = await self._accounts.find_by_username(username)
        if account is None:
            raise AuthenticationError

        if account.session_id is None:
            await self._sessions.destroy(session_id)
            raise SessionInvalidatedError

        if account.session_id != session_id:
            await self._sessions.destroy(session_id)
            logger.info("session_superseded", username=username)
            raise SupersededElsewhereError

        if await self._sessions.get(session_id) is None:
            await self._accounts.release_claim(username, session_id)
            logger.info("session_expired", username=username)
            raise SessionExpiredError

        return account

    async def logout(self, session_id: str | None, username: str | None) -> None:
        """End the caller's session and release the claim only if it still belongs to it."""
        if session_id is None:
            return
        await self._sessions.destroy(session_id)
        if username:
            released = await self._accounts.release_claim(username, session_id)
            logger.debug("logout", username=username, claim_released=bool(released))

    async def _evict(self, username: str, session_id: str) -> None:
        try:
            await self._sessions.destroy(session_id)
        except Exception:
            # The old row may already be gone or unreachable; eviction proceeds regardless
            logger.warning("eviction_destroy_failed", username=username, exc_info=True)
        await self._accounts.clear_claim(username)
        logger.info("previous_session_evicted", username=username)
