from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from solosession.config import Config
from solosession.core.modules.claim.service import AccountDirectory, ClaimService, SessionStore


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""


class Services:
    """Service registry holding the account directory, the session store and the claim core."""

    accounts: AccountDirectory
    sessions: SessionStore
    claim: ClaimService

    def __init__(self, accounts: AccountDirectory, sessions: SessionStore, session_ttl: timedelta) -> None:
        self.accounts = accounts
        self.sessions = sessions
        self.claim = ClaimService(accounts, sessions, session_ttl)
        # Order matters for initialization - accounts first
        self._services: list[Any] = [accounts, sessions]

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            if hasattr(service, "on_start"):
                await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in self._services:
            if hasattr(service, "on_stop"):
                await service.on_stop()


class Core:
    """Container providing config, database connection, and all service instances."""

    config: Config
    services: Services
    mongo_client: AsyncMongoClient[dict[str, Any]] | None

    def __init__(
        self, config: Config, services: Services, mongo_client: AsyncMongoClient[dict[str, Any]] | None = None
    ) -> None:
        self.config = config
        self.services = services
        self.mongo_client = mongo_client

    @classmethod
    def from_config(cls, config: Config) -> Core:
        """Connect to MongoDB and build the MongoDB-backed services."""
        from solosession.core.modules.account.service import AccountService  # noqa: PLC0415
        from solosession.core.modules.session.service import SessionService  # noqa: PLC0415

        mongo_client: AsyncMongoClient[dict[str, Any]] = AsyncMongoClient(config.database_url, uuidRepresentation="standard")
        database = mongo_client.get_database(urlparse(config.database_url).path[1:])
        services = Services(
            accounts=AccountService(database, admin_password=config.admin_password),
            sessions=SessionService(database),
            session_ttl=timedelta(seconds=config.session_ttl_seconds),
        )
        return cls(config, services, mongo_client)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Start all services on application startup."""
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        if self.mongo_client is not None:
            await self.mongo_client.aclose()
