"""
Result and exception mapping for the HTTP surface.

Business outcomes arrive as `Result` values and are mapped by the type of
their first error. Domain faults keep the status of their exception class;
anything else becomes a 500. Details are only exposed in development.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from app.config.settings import Settings, get_settings
from app.core.domain import DomainException, Err, ErrorType, Result, ValidationError, errors_of, first_error

logger = logging.getLogger(__name__)

STATUS_BY_ERROR_TYPE: dict[ErrorType, int] = {
    ErrorType.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorType.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorType.FAILURE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorType.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def validation_errors_by_field(result: Err) -> dict[str, list[str]]:
    """Group messages by field; errors without a field land under "general"."""
    grouped: dict[str, list[str]] = {}
    for error in errors_of(result):
        field = error.field if isinstance(error, ValidationError) and error.field else "general"
        grouped.setdefault(field, []).append(error.description)
    return grouped


def error_response(result: Err) -> JSONResponse:
    first = first_error(result)
    status_code = STATUS_BY_ERROR_TYPE.get(first.type, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if first.type == ErrorType.VALIDATION:
        content: dict[str, Any] = {
            "error": True,
            "message": "Validation error",
            "errors": validation_errors_by_field(result),
            "status_code": status_code,
        }
    else:
        content = {
            "error": True,
            "code": first.code,
            "message": first.description,
            "details": [e.to_dict() for e in errors_of(result)[1:]],
            "status_code": status_code,
        }
    return JSONResponse(status_code=status_code, content=content)


def result_response(result: Result[Any], success_status: int = status.HTTP_200_OK) -> Response:
    """Ok -> `success_status` with the encoded value; Err -> error_response."""
    if isinstance(result, Err):
        return error_response(result)
    value = result.value
    if value is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return JSONResponse(status_code=success_status, content=jsonable_encoder(value))


def build_global_exception_handler(settings: Settings | None = None):
    """Create the catch-all handler; exception details are exposed only in development."""
    settings = settings or get_settings()

    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {exc!s}",
            exc_info=True,
        )
        content: dict[str, Any] = {
            "error": True,
            "message": "Internal server error",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
        }
        if settings.is_development:
            content["detail"] = str(exc)
            content["exception"] = type(exc).__name__
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

    return global_exception_handler


def build_domain_exception_handler(settings: Settings | None = None):
    """Faults raised by the core keep their own status; their details are exposed only in development."""
    settings = settings or get_settings()

    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}", exc_info=True)
        content: dict[str, Any] = {"error": True, "code": exc.code, "status_code": exc.http_status}
        if settings.is_development:
            content["exception"] = exc.to_dict()
        return JSONResponse(status_code=exc.http_status, content=content)

    return domain_exception_handler


def register_exception_handlers(app: FastAPI, settings: Settings | None = None) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Optional settings (defaults to get_settings())
    """
    app.add_exception_handler(DomainException, build_domain_exception_handler(settings))
    app.add_exception_handler(Exception, build_global_exception_handler(settings))
    logger.info("Exception handlers registered")
