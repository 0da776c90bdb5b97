from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from solosession.config import Config
from solosession.core.core import Core
from solosession.core.modules.account.models import Account
from solosession.core.modules.session.models import LoginResult, SessionRecord


class App:
    """Facade for all application operations, delegates to the claim core."""

    def __init__(self, core: Core) -> None:
        self._core = core

    @classmethod
    def from_config(cls, config: Config) -> "App":
        return cls(Core.from_config(config))

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def resolve_session(self, session_id: str) -> SessionRecord | None:
        """Load the live session for a presented identifier."""
        return await self._core.services.sessions.get(session_id)

    async def login(self, username: str, password: str) -> LoginResult:
        """Authenticate user and claim the account for a new session."""
        return await self._core.services.claim.login(username, password)

    async def check_session(self, session_id: str | None, username: str | None) -> Account:
        """Ensure the presented session is the account's current claim."""
        return await self._core.services.claim.check(session_id, username)

    async def logout(self, session_id: str | None, username: str | None) -> None:
        """End the session, releasing the account claim if it still owns it."""
        await self._core.services.claim.logout(session_id, username)
