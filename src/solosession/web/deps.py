from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from itsdangerous import BadSignature, URLSafeSerializer
from pydantic import BaseModel

from solosession.app import App
from solosession.core.modules.account.models import Account
from solosession.core.modules.session.models import LoginResult

bearer_scheme = HTTPBearer(auto_error=False)

# Keys inside the signed session cookie and the signed bearer token
SESSION_ID_KEY = "session_id"
USERNAME_KEY = "username"
BEARER_TOKEN_SALT = "solosession.bearer"


class PresentedSession(BaseModel):
    """Session identifier sent by the client and the username bound to it."""

    session_id: str | None = None
    username: str | None = None


def bearer_serializer(app: App) -> URLSafeSerializer:
    return URLSafeSerializer(app.config.session_secret_key, salt=BEARER_TOKEN_SALT)


def issue_bearer_token(app: App, result: LoginResult) -> str:
    """Sign the session id together with its username, like the cookie does."""
    return bearer_serializer(app).dumps({SESSION_ID_KEY: result.session_id, USERNAME_KEY: result.username})


def read_bearer_token(app: App, token: str) -> PresentedSession | None:
    """Decode a bearer token, None if the signature or payload is invalid."""
    try:
        payload = bearer_serializer(app).loads(token)
    except BadSignature:
        return None
    if not isinstance(payload, dict):
        return None
    session_id, username = payload.get(SESSION_ID_KEY), payload.get(USERNAME_KEY)
    if not isinstance(session_id, str) or not isinstance(username, str):
        return None
    return PresentedSession(session_id=session_id, username=username)


def read_cookie_session(request: Request) -> PresentedSession:
    return PresentedSession(
        session_id=request.session.get(SESSION_ID_KEY),
        username=request.session.get(USERNAME_KEY),
    )


async def start_cookie_session(app: App, request: Request, result: LoginResult) -> None:
    """Regenerate the cookie session: end whatever session it held, then store the freshly claimed one."""
    previous = read_cookie_session(request)
    if previous.session_id is not None and previous.session_id != result.session_id:
        # Compare-and-clear, so the claim just taken by this login is never released
        await app.logout(previous.session_id, previous.username)
    request.session.clear()
    request.session[SESSION_ID_KEY] = result.session_id
    request.session[USERNAME_KEY] = result.username


def end_cookie_session(request: Request) -> None:
    if "session" in request.scope:
        request.session.clear()


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_presented_session(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> PresentedSession:
    """Read the session from the Authorization Bearer header, falling back to the signed cookie."""

    # Check Bearer token first (preferred)
    if credentials and credentials.scheme == "Bearer":
        session = read_bearer_token(app, credentials.credentials)
        if session is not None:
            return session

    # Fall back to cookie
    return read_cookie_session(request)


async def require_claimed_session(
    app: Annotated[App, Depends(get_app)],
    session: Annotated[PresentedSession, Depends(get_presented_session)],
) -> Account:
    """Route guard: let the request through only if its session still owns the account."""
    return await app.check_session(session.session_id, session.username)


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
SessionDep = Annotated[PresentedSession, Depends(get_presented_session)]
ClaimedAccountDep = Annotated[Account, Depends(require_claimed_session)]
