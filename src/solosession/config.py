from typing import Literal

from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080
    debug: bool = False
    session_secret_key: str  # Signs the session cookie
    session_ttl_seconds: int = 8 * 60 * 60  # Session lifetime, also used as cookie max-age
    cookie_name: str = "sid"
    cookie_secure: bool = False  # Set to True behind HTTPS
    cookie_samesite: Literal["lax", "strict", "none"] = "lax"
    public_path: str | None = None  # Directory with login.html, home.html and static assets (optional)
    admin_password: str | None = None  # Provision an "admin" account on startup if missing (optional)
    cors_origins: list[str] = []

    model_config = {
        "env_file": [".env"],
        "env_prefix": "SOLOSESSION_",
        "extra": "ignore",
    }
