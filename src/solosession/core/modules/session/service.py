import secrets
from datetime import timedelta
from typing import Any

from pymongo.asynchronous.database import AsyncDatabase

from solosession.core.core import Service
from solosession.core.modules.session.models import SessionRecord, SessionState
from solosession.utils import now


class SessionService(Service):
    """Session store backed by the sessions collection."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        # TTL index: MongoDB removes rows once expires_at has passed
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    def new_session_id(self) -> str:
        return secrets.token_urlsafe(32)

    async def get(self, session_id: str) -> SessionRecord | None:
        """Return the live session, or None if it is missing or past its expiration."""
        doc = await self._collection.find_one({"_id": session_id, "expires_at": {"$gt": now()}})
        if doc is None:
            return None
        return SessionRecord.model_validate(doc)

    async def upsert(self, session_id: str, state: SessionState, ttl: timedelta) -> SessionRecord:
        record = SessionRecord(
            session_id=session_id, username=state.username, data=state.data, expires_at=now() + ttl
        )
        await self._collection.replace_one({"_id": session_id}, record.to_mongo(), upsert=True)
        return record

    async def destroy(self, session_id: str) -> bool:
        """Remove a session. Returns False if it was already gone."""
        result = await self._collection.delete_one({"_id": session_id})
        return result.deleted_count > 0
