import logging
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from solosession.errors import AuthenticationError, RejectionKind, SessionClaimLostError, ValidationError
from solosession.web.deps import end_cookie_session

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"


def create_json_error_response(status_code: int, message: str, error_type: str | None = None) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content)


def create_login_redirect(error_type: str) -> RedirectResponse:
    """Send page requests back to the login form with the rejection reason."""
    return RedirectResponse(url="/?" + urlencode({"error": error_type}), status_code=303)


def is_api_request(request: Request) -> bool:
    return request.url.path.startswith(API_PREFIX)


async def user_error_handler(request: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses, tagging auth failures with their rejection kind."""
    if isinstance(exc, AuthenticationError):
        status_code = 409 if isinstance(exc, SessionClaimLostError) else 401
        error_type = str(exc.kind)
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    if is_api_request(request):
        response: Response = create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type)
    else:
        response = create_login_redirect(error_type)

    if isinstance(exc, AuthenticationError) and exc.terminates_session:
        end_cookie_session(request)
    return response


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected errors, including database failures (500)."""
    logger.exception("Unexpected error: %s", exc)
    if not is_api_request(request):
        return create_login_redirect(RejectionKind.INTERNAL)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type=RejectionKind.INTERNAL
    )
