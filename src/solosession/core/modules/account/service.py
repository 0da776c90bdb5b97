from typing import Any

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from solosession.core.core import Service
from solosession.core.modules.account.models import Account
from solosession.errors import ValidationError

logger = structlog.get_logger(__name__)


# bcrypt only looks at the first 72 bytes of the input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(account: Account, password: str) -> bool:
    """Check the presented password against the stored hash. Over-long passwords never match."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), account.password_hash.encode("utf-8"))


class AccountService(Service):
    """Account directory backed by the accounts collection.

    Every claim mutation is a single update_one whose filter carries the
    expected current session_id, so MongoDB applies it atomically per document.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]], admin_password: str | None = None) -> None:
        super().__init__(database)
        self._collection = database.get_collection("accounts")
        self._admin_password = admin_password

    async def find_by_username(self, username: str) -> Account | None:
        doc = await self._collection.find_one({"username": username})
        if doc is None:
            return None
        return Account.model_validate(doc)

    def verify_credentials(self, account: Account, password: str) -> bool:
        return verify_password(account, password)

    async def clear_claim(self, username: str) -> None:
        """Drop the account's claim unconditionally."""
        await self._collection.update_one({"username": username}, {"$set": {"session_id": None}})

    async def conditional_claim(self, username: str, session_id: str) -> int:
        """Claim the account for session_id only if it is currently unclaimed. Returns modified count."""
        result = await self._collection.update_one(
            {"username": username, "session_id": None},
            {"$set": {"session_id": session_id}},
        )
        return result.modified_count

    async def release_claim(self, username: str, session_id: str) -> int:
        """Drop the claim only if it still belongs to session_id. Returns modified count."""
        result = await self._collection.update_one(
            {"username": username, "session_id": session_id},
            {"$set": {"session_id": None}},
        )
        return result.modified_count

    async def create_account(self, username: str, password: str) -> Account:
        """Create an unclaimed account with a hashed password."""
        if not username or not password:
            raise ValidationError("Username and password are required")
        account = Account(username=username, password_hash=hash_password(password))
        try:
            await self._collection.insert_one(account.to_mongo())
        except DuplicateKeyError as e:
            raise ValidationError(f"Account '{username}' already exists") from e
        return account

    async def ensure_admin_account_exists(self) -> None:
        """Create the admin account if an admin password is configured and it is missing."""
        if self._admin_password and await self.find_by_username("admin") is None:
            await self.create_account("admin", self._admin_password)
            logger.info("admin_account_created")

    async def on_start(self) -> None:
        """Create indexes and provision the admin account."""
        await self._collection.create_index([("username", 1)], unique=True)
        await self.ensure_admin_account_exists()
        logger.debug("account_service_started")
