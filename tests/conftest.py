"""Shared pytest fixtures.

The in-memory directory and store yield to the event loop before every
operation so concurrent logins interleave the way they would against a real
database. Conditional updates stay atomic: nothing awaits between the
predicate check and the write.
"""

import asyncio
import secrets
from datetime import timedelta

import bcrypt
import pytest
from fastapi.testclient import TestClient

from solosession.app import App
from solosession.config import Config
from solosession.core.core import Core, Services
from solosession.core.modules.account.models import Account
from solosession.core.modules.account.service import verify_password
from solosession.core.modules.claim.service import ClaimService
from solosession.core.modules.session.models import SessionRecord, SessionState
from solosession.utils import now
from solosession.web.server import create_fastapi_app

SESSION_TTL = timedelta(hours=1)


class InMemoryAccountDirectory:
    def __init__(self) -> None:
        self.accounts: dict[str, Account] = {}

    def add(self, username: str, password: str, session_id: str | None = None) -> Account:
        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")
        account = Account(username=username, password_hash=password_hash, session_id=session_id)
        self.accounts[username] = account
        return account

    def claim_of(self, username: str) -> str | None:
        return self.accounts[username].session_id

    async def find_by_username(self, username: str) -> Account | None:
        await asyncio.sleep(0)
        account = self.accounts.get(username)
        return account.model_copy() if account else None

    def verify_credentials(self, account: Account, password: str) -> bool:
        return verify_password(account, password)

    async def clear_claim(self, username: str) -> None:
        await asyncio.sleep(0)
        if username in self.accounts:
            self.accounts[username].session_id = None

    async def conditional_claim(self, username: str, session_id: str) -> int:
        await asyncio.sleep(0)
        account = self.accounts.get(username)
        if account is None or account.session_id is not None:
            return 0
        account.session_id = session_id
        return 1

    async def release_claim(self, username: str, session_id: str) -> int:
        await asyncio.sleep(0)
        account = self.accounts.get(username)
        if account is None or account.session_id != session_id:
            return 0
        account.session_id = None
        return 1


class InMemorySessionStore:
    def __init__(self) -> None:
        self.records: dict[str, SessionRecord] = {}
        self.fail_destroy = False

    def expire(self, session_id: str) -> None:
        """Move the expiration into the past without removing the row."""
        self.records[session_id].expires_at = now() - timedelta(seconds=1)

    def new_session_id(self) -> str:
        return secrets.token_urlsafe(32)

    async def get(self, session_id: str) -> SessionRecord | None:
        await asyncio.sleep(0)
        record = self.records.get(session_id)
        if record is None or record.expires_at <= now():
            return None
        return record

    async def upsert(self, session_id: str, state: SessionState, ttl: timedelta) -> SessionRecord:
        await asyncio.sleep(0)
        record = SessionRecord(session_id=session_id, username=state.username, data=state.data, expires_at=now() + ttl)
        self.records[session_id] = record
        return record

    async def destroy(self, session_id: str) -> bool:
        await asyncio.sleep(0)
        if self.fail_destroy:
            raise ConnectionError("session store unavailable")
        return self.records.pop(session_id, None) is not None


@pytest.fixture
def accounts():
    directory = InMemoryAccountDirectory()
    directory.add("alice", "wonderland")
    return directory


@pytest.fixture
def sessions():
    return InMemorySessionStore()


@pytest.fixture
def claim(accounts, sessions):
    return ClaimService(accounts, sessions, SESSION_TTL)


@pytest.fixture
def config():
    return Config(database_url="mongodb://localhost:27017/solosession_test", session_secret_key="test-secret")


@pytest.fixture
def fastapi_app(config, accounts, sessions):
    core = Core(config, Services(accounts, sessions, SESSION_TTL))
    return create_fastapi_app(App(core), config)


@pytest.fixture
def client(fastapi_app):
    with TestClient(fastapi_app) as test_client:
        yield test_client
