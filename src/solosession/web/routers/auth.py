from datetime import datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from solosession.web.deps import AppDep, SessionDep, end_cookie_session, issue_bearer_token, start_cookie_session
from solosession.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    """Authentication request."""

    username: str = Field(..., description="Username for authentication")
    password: str = Field(..., description="Password for authentication")


class LoginResponse(BaseModel):
    """Authentication response."""

    username: str = Field(..., description="Authenticated username")
    session_id: str = Field(..., description="Session identifier")
    access_token: str = Field(..., description="Signed session and username pair, usable as a Bearer token")
    expires_at: datetime = Field(..., description="Session expiration time (UTC)")


class SessionStatus(BaseModel):
    """Whether the caller carries a logged-in session."""

    active: bool = Field(..., description="True if the presented session has a logged-in user")


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with username and password. Any previous session of the account is ended.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        409: {"model": ErrorResponse, "description": "A concurrent login claimed the account, retry"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, request: Request) -> LoginResponse:
    result = await app.login(login_data.username, login_data.password)
    await start_cookie_session(app, request, result)
    return LoginResponse(
        username=result.username,
        session_id=result.session_id,
        access_token=issue_bearer_token(app, result),
        expires_at=result.expires_at,
    )


@router.post(
    "/auth/logout",
    summary="End session",
    description="End the current session. The account claim is released only if this session still owns it.",
    operation_id="logout",
    status_code=204,
    responses={204: {"description": "Successfully logged out"}},
)
async def logout(app: AppDep, session: SessionDep, request: Request) -> None:
    await app.logout(session.session_id, session.username)
    end_cookie_session(request)


@router.get(
    "/auth/session",
    summary="Probe session",
    description="Report whether the caller carries a live logged-in session, without enforcing the single-session check.",
    operation_id="getSessionStatus",
)
async def session_status(app: AppDep, session: SessionDep) -> SessionStatus:
    if session.session_id is None:
        return SessionStatus(active=False)
    record = await app.resolve_session(session.session_id)
    return SessionStatus(active=record is not None and record.username == session.username)
