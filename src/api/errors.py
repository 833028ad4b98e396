"""
Exception handlers - map domain error kinds to HTTP responses.

The domain raises AccountError subclasses tagged with an ErrorKind; this is
the only place that turns them into status codes and response bodies.
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.domain.exceptions import AccountError, ErrorKind

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.EXPIRED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DEPENDENCY: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

GENERIC_ERROR_MESSAGE = "Something went wrong"


def _error_body(message: str, exc: BaseException | None = None, *, debug: bool) -> dict:
    body: dict = {"success": False, "message": message}
    if debug and exc is not None:
        body["stack"] = "".join(traceback.format_exception(exc))
    return body


def _debug(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return settings is not None and settings.environment == "development"


async def handle_account_error(request: Request, exc: AccountError) -> JSONResponse:
    status_code = STATUS_BY_KIND[exc.kind]
    debug = _debug(request)

    if exc.kind is ErrorKind.DEPENDENCY:
        logger.error(
            "Dependency failure on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc,
        )
        message = exc.message if debug else GENERIC_ERROR_MESSAGE
        return JSONResponse(status_code=status_code, content=_error_body(message, exc, debug=debug))

    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.kind.value, exc.message)
    return JSONResponse(status_code=status_code, content=_error_body(exc.message, debug=False))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        field = error["loc"][-1] if error.get("loc") else "body"
        messages.append(f"{field}: {error['msg']}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(", ".join(messages) or "Invalid request", debug=False),
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message, debug=False),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    debug = _debug(request)
    message = str(exc) if debug else GENERIC_ERROR_MESSAGE
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(message, exc, debug=debug),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccountError, handle_account_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
