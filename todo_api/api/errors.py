import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error: carries the HTTP status and the message shown to clients."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message


DEFAULT_API_KEY_HEADER = "X-Api-Key"


class ApiKeyError(AppError):
    """Auth failure; the message names the header the server actually reads."""

    template = "{header}"

    def __init__(self, header_name: str = DEFAULT_API_KEY_HEADER):
        super().__init__(self.template.format(header=header_name))
        self.header_name = header_name


class MissingApiKey(ApiKeyError):
    status_code = 400
    template = "Please provide an API Key in the {header} header of your request."


class InvalidApiKey(ApiKeyError):
    status_code = 401
    template = "The provided API key in the {header} header is invalid."


class TaskNotFound(AppError):
    status_code = 404
    message = "Task not found"


class UserNotFound(AppError):
    status_code = 404
    message = "User not found"


class ValidationFailed(AppError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: list):
        super().__init__()
        self.errors = list(errors)


class DatabaseError(AppError):
    """Wraps a driver/ORM failure; the original cause stays on __cause__ for the server log."""


class ConfigurationError(AppError):
    """Raised when settings can't be loaded or are invalid."""


def _error_body(request: Request, status_code: int, message: str) -> dict:
    return {"message": message, "status": status_code, "path": request.url.path}


def register_exception_handlers(app: FastAPI) -> None:
    """Attach simple, consistent JSON error handlers."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        content = _error_body(request, exc.status_code, exc.message)
        if isinstance(exc, ValidationFailed):
            content["validation_errors"] = [
                e.model_dump() if hasattr(e, "model_dump") else dict(e) for e in exc.errors
            ]
        if exc.status_code >= 500:
            # Clients get the generic message; the cause is only logged here.
            logger.error(
                "%s on %s %s", type(exc).__name__, request.method, request.url.path,
                exc_info=exc.__cause__ or exc,
            )
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "HTTPError"
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.status_code, message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        content = _error_body(request, 422, "ValidationError")
        content["details"] = jsonable_errors(exc)
        return JSONResponse(status_code=422, content=content)


def jsonable_errors(exc: RequestValidationError) -> list:
    # pydantic may put the raw exception object under "ctx"; keep only JSON-safe parts
    return jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
