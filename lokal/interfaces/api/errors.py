"""Application-wide handlers rendering errors as ``{"success": false, ...}``."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lokal.domain.results import ErrorKind, OperationResult

logger = logging.getLogger(__name__)

_STATUS_FOR_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DELIVERY: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.STORE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def raise_for_result(result: OperationResult, message: str) -> None:
    """Raise an ``HTTPException`` matching ``result`` when it failed.

    Store failures surface as ``message`` only; the underlying error was
    already logged by the service.
    """

    if result.ok:
        return
    code = _STATUS_FOR_KIND.get(result.error_kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = message if result.error_kind == ErrorKind.STORE else (result.error or message)
    raise HTTPException(status_code=code, detail=detail)


def _first_validation_message(exc: RequestValidationError) -> str:
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        return f"{location}: {message}" if location else message
    return "Invalid request"


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
        logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": _first_validation_message(exc)},
        )


__all__ = ["install_error_handlers", "raise_for_result"]
