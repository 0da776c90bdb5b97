from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from solosession.errors import RejectionKind


def set_custom_openapi(app: FastAPI, cookie_name: str) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="solosession API",
            version="0.1.0",
            summary="Single active session per account",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "description": "access_token from login as a bearer token",
            },
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": cookie_name,
                "description": "Session identifier stored in cookie (preferred for browsers)",
            },
        }

        # Only guarded routes require a session
        guarded_endpoints = {
            ("GET", "/api/v1/data"),
        }

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in guarded_endpoints:
                    operation["security"] = [{"BearerAuth": []}, {"SessionCookie": []}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid username or password", "type": RejectionKind.INVALID_CREDENTIALS.value},
                {"message": "This account was logged in elsewhere", "type": RejectionKind.SUPERSEDED_ELSEWHERE.value},
                {"message": "Session expired", "type": RejectionKind.SESSION_EXPIRED.value},
            ]
        }
    }
