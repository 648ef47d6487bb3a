from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import get_logger
from app.core.settings import get_app_settings

logger = get_logger(__name__)


class BookApiError(HTTPException):
    """HTTP error carrying a machine-usable ``code`` alongside its message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **extra: Any) -> None:
        self.message = message or self.message
        self.extra = extra
        super().__init__(
            status_code=self.status_code,
            detail={"code": self.code, "message": self.message},
        )


class BookValidationError(BookApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_failed"
    message = "Validation failed"

    def __init__(self, errors: list[dict[str, str]]) -> None:
        super().__init__(errors=errors)
        self.errors = errors


class MalformedRequestError(BookApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "search_query_required"
    message = "Search query is required"


class BookNotFoundError(BookApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "book_not_found"
    message = "Book not found"


class BookConflictError(BookApiError):
    status_code = status.HTTP_409_CONFLICT
    code = "book_exists"
    message = "A book with this title and author already exists"


_GENERIC_HTTP_ERRORS = {
    status.HTTP_404_NOT_FOUND: ("endpoint_not_found", "Endpoint not found"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("method_not_allowed", "Method not allowed"),
}


def error_body(code: str, message: str, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message, "code": code}
    body.update(extra)
    return body


async def book_api_error_handler(request: Request, exc: BookApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.message, **exc.extra),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc, BookApiError):
        return await book_api_error_handler(request, exc)
    code, message = _GENERIC_HTTP_ERRORS.get(exc.status_code, ("http_error", str(exc.detail)))
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, message),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Imported here: the schema module depends on this one.
    from app.schemas.book import collect_field_errors

    errors = [error.model_dump() for error in collect_field_errors(exc.errors())]
    return await book_api_error_handler(request, BookValidationError(errors))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", path=request.url.path, method=request.method, exc_info=exc)
    settings = getattr(request.app.state, "settings", None) or get_app_settings()
    detail = str(exc) if settings.is_development else "Something went wrong"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("internal_error", "Internal server error", error=detail),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Route every failure through the uniform error envelope."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
