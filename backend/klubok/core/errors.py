# klubok/core/errors.py
"""
Error taxonomy shared by services and routers.

Every failure that may reach a client is one of the kinds below. Services raise
the matching exception; the handlers registered by `register_error_handlers`
turn it into a status code + JSON body at the HTTP boundary:

    {"error": {"code": "AUTH", "message": "Invalid or expired token"}}

Anything else that escapes a route is logged and reported as UNEXPECTED (500).
"""
import enum
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    VALIDATION = "VALIDATION"
    AUTH = "AUTH"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    CONFIGURATION = "CONFIGURATION"
    UNEXPECTED = "UNEXPECTED"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.AUTH: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.CONFIGURATION: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class KlubokError(Exception):
    """Base class for every error the API reports to clients."""

    kind: ErrorKind = ErrorKind.UNEXPECTED
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_dict(self) -> dict:
        return {"error": {"code": self.kind.value, "message": self.message}}


class ValidationError(KlubokError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid request"


class AuthError(KlubokError):
    kind = ErrorKind.AUTH
    default_message = "Authorization required"


class NotFoundError(KlubokError):
    kind = ErrorKind.NOT_FOUND
    default_message = "User not found"


class ConflictError(KlubokError):
    kind = ErrorKind.CONFLICT
    default_message = "User with this email or username already exists"


class ConfigurationError(KlubokError):
    kind = ErrorKind.CONFIGURATION
    default_message = "Server is not configured"


class UnexpectedError(KlubokError):
    kind = ErrorKind.UNEXPECTED


def error_response(exc: KlubokError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _handle_klubok_error(request: Request, exc: KlubokError) -> JSONResponse:
    if exc.kind in (ErrorKind.CONFIGURATION, ErrorKind.UNEXPECTED):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Report the first offending field, e.g. "room: Field required"
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    return error_response(ValidationError(message))


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(UnexpectedError())


def register_error_handlers(app: FastAPI) -> None:
    """Install the boundary handlers on the application."""
    app.add_exception_handler(KlubokError, _handle_klubok_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)
