from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from solosession.app import App
from solosession.config import Config
from solosession.errors import UserError
from solosession.web.error_handlers import general_exception_handler, user_error_handler
from solosession.web.openapi import set_custom_openapi
from solosession.web.routers import auth_router, data_router, pages_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="solosession API",
        lifespan=lifespan,
    )
    # Store app instance in app state
    app.state.app = app_instance

    # Signed cookie carrying the session id and its username, the state itself lives in the session store
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.session_secret_key,
        session_cookie=config.cookie_name,
        max_age=config.session_ttl_seconds,
        same_site=config.cookie_samesite,
        https_only=config.cookie_secure,
    )

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(data_router, prefix="/api/v1")
    app.include_router(pages_router)

    if config.public_path and Path(config.public_path).is_dir():
        app.mount("/static", StaticFiles(directory=config.public_path), name="static")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app, config.cookie_name)

    return app
