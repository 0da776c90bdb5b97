from abc import ABC
from enum import StrEnum
from typing import ClassVar


class RejectionKind(StrEnum):
    """Machine-readable reason attached to every authentication failure."""

    INVALID_CREDENTIALS = "invalid_credentials"
    SESSION_CLAIM_LOST = "session_claim_lost"
    UNAUTHENTICATED = "unauthenticated"
    SESSION_INVALIDATED = "session_invalidated"
    SUPERSEDED_ELSEWHERE = "superseded_elsewhere"
    SESSION_EXPIRED = "session_expired"
    INTERNAL = "internal"


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class AuthenticationError(UserError):
    """Raised when the caller has no authenticated session."""

    kind: ClassVar[RejectionKind] = RejectionKind.UNAUTHENTICATED
    # Whether the caller's local session must be ended (cookie removed)
    terminates_session: ClassVar[bool] = False

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when username or password do not match."""

    kind = RejectionKind.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class SessionClaimLostError(AuthenticationError):
    """Raised when a concurrent login claimed the account first. Retrying the login resolves it."""

    kind = RejectionKind.SESSION_CLAIM_LOST

    def __init__(self, message: str = "Another login claimed this account, please try again") -> None:
        super().__init__(message)


class SessionInvalidatedError(AuthenticationError):
    """Raised when the account holds no active claim."""

    kind = RejectionKind.SESSION_INVALIDATED
    terminates_session = True

    def __init__(self, message: str = "Session is no longer valid") -> None:
        super().__init__(message)


class SupersededElsewhereError(AuthenticationError):
    """Raised when a newer login evicted the caller's session."""

    kind = RejectionKind.SUPERSEDED_ELSEWHERE
    terminates_session = True

    def __init__(self, message: str = "This account was logged in elsewhere") -> None:
        super().__init__(message)


class SessionExpiredError(AuthenticationError):
    """Raised when the claimed session is gone from the session store."""

    kind = RejectionKind.SESSION_EXPIRED
    terminates_session = True

    def __init__(self, message: str = "Session expired") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""
