from solosession.core.db import MongoModel


class Account(MongoModel):
    """User account with credentials and the single claimed session.

    Indexed on username - unique.
    """

    username: str
    password_hash: str  # bcrypt hash
    session_id: str | None = None  # Claimed session, None when the account is unclaimed
