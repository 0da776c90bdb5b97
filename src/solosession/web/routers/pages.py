"""Browser pages: login form, protected home page and form-based logout."""

from html import escape
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Form, Request
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse, Response

from solosession.config import Config
from solosession.web.deps import AppDep, ClaimedAccountDep, SessionDep, end_cookie_session, start_cookie_session

router = APIRouter(tags=["pages"], include_in_schema=False)

LOGIN_PAGE = """<!doctype html>
<html><head><meta charset="utf-8"><title>Login</title></head>
<body>
  <h1>Login</h1>
  {notice}
  <form method="POST" action="/login">
    <input name="username" placeholder="username" required>
    <input type="password" name="password" placeholder="password" required>
    <button>Sign in</button>
  </form>
</body></html>"""

HOME_PAGE = """<!doctype html>
<html><head><meta charset="utf-8"><title>Home</title></head>
<body>
  <h1>Home</h1>
  <p>User: {username}</p>
  <form method="POST" action="/logout"><button>Sign out</button></form>
</body></html>"""


def public_file(config: Config, name: str) -> Path | None:
    """Return a page from the public directory if one is configured and present."""
    if config.public_path is None:
        return None
    path = Path(config.public_path) / name
    return path if path.is_file() else None


@router.get("/")
async def login_page(app: AppDep, error: str | None = None, msg: str | None = None) -> Response:
    page = public_file(app.config, "login.html")
    if page is not None:
        return FileResponse(page)
    notice = ""
    if error:
        notice = f'<p class="error">{escape(error)}</p>'
    elif msg:
        notice = f'<p class="notice">{escape(msg)}</p>'
    return HTMLResponse(LOGIN_PAGE.format(notice=notice))


@router.post("/login")
async def login_form(
    app: AppDep,
    request: Request,
    username: Annotated[str, Form()],
    password: Annotated[str, Form()],
) -> Response:
    result = await app.login(username, password)
    await start_cookie_session(app, request, result)
    return RedirectResponse(url="/home", status_code=303)


@router.get("/home")
async def home_page(app: AppDep, account: ClaimedAccountDep) -> Response:
    page = public_file(app.config, "home.html")
    if page is not None:
        return FileResponse(page)
    return HTMLResponse(HOME_PAGE.format(username=escape(account.username)))


@router.post("/logout")
async def logout_form(app: AppDep, session: SessionDep, request: Request) -> Response:
    await app.logout(session.session_id, session.username)
    end_cookie_session(request)
    return RedirectResponse(url="/?msg=logout", status_code=303)
