"""Session store models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SessionState(BaseModel):
    """Per-session state blob written to the store."""

    username: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)


class SessionRecord(BaseModel):
    """Stored session keyed by its opaque identifier.

    Indexed on expires_at (TTL, expires at the stored time).
    """

    session_id: str = Field(alias="_id")
    username: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    expires_at: datetime

    model_config = ConfigDict(populate_by_name=True)

    def to_mongo(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class LoginResult(BaseModel):
    """Outcome of a successful login."""

    username: str = Field(..., description="Authenticated username")
    session_id: str = Field(..., description="Session identifier now claiming the account")
    expires_at: datetime = Field(..., description="Session expiration time (UTC)")
