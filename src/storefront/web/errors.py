"""Maps domain and framework exceptions onto enveloped HTTP error responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.identity.exceptions import AuthenticationFailed, PermissionDenied
from storefront.web.envelope import failure

logger = structlog.get_logger(__name__)

SERVER_ERROR_MESSAGE = "An error occurred while processing your request"


def flatten_messages(messages) -> list[str]:
    """Turn Protean's ``{field: [messages]}`` (or a bare string) into a flat list."""
    if messages is None:
        return []
    if isinstance(messages, str):
        return [messages] if messages else []
    if isinstance(messages, dict):
        flat = []
        for value in messages.values():
            flat.extend(flatten_messages(value))
        return flat
    if isinstance(messages, list | tuple):
        flat = []
        for value in messages:
            flat.extend(flatten_messages(value))
        return flat
    return [str(messages)]


def _response(status_code: int, message: str, errors: list[str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=failure(message, errors))


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    errors = flatten_messages(exc.messages)
    return _response(400, errors[0] if len(errors) == 1 else "Validation failed", errors)


async def _invalid_operation(request: Request, exc: InvalidOperationError) -> JSONResponse:
    errors = flatten_messages(getattr(exc, "messages", None) or str(exc)) or ["Invalid operation"]
    return _response(400, errors[0], errors)


async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"][1:])
        errors.append(f"{location}: {error['msg']}" if location else error["msg"])
    return _response(400, "Validation failed", errors)


async def _authentication_failed(request: Request, exc: AuthenticationFailed) -> JSONResponse:
    return _response(401, "Unauthorized", [exc.message])


async def _permission_denied(request: Request, exc: PermissionDenied) -> JSONResponse:
    return _response(403, "Forbidden", [exc.message])


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    errors = flatten_messages(getattr(exc, "messages", None) or str(exc)) or ["Resource not found"]
    return _response(404, "Resource not found", errors)


async def _http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content=failure(detail), headers=exc.headers)


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return _response(500, SERVER_ERROR_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(InvalidOperationError, _invalid_operation)
    app.add_exception_handler(RequestValidationError, _request_validation)
    app.add_exception_handler(AuthenticationFailed, _authentication_failed)
    app.add_exception_handler(PermissionDenied, _permission_denied)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(StarletteHTTPException, _http_exception)
    app.add_exception_handler(Exception, _unhandled)
