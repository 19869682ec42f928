"""Exception handlers rendering the ``{"error": {...}}`` response shape."""

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from quota_gate.common.exceptions import (
    NOT_FOUND,
    UNKNOWN_ERROR,
    QuotaGateError,
    StoreUnavailableError,
    ValidationError,
)

logger = logging.getLogger("quota_gate.http")


async def quota_gate_error_handler(request: Request, exc: QuotaGateError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "http.error",
        extra={"error_code": exc.code, "status": exc.status_code,
               "method": request.method, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("path", "query", "body")]
        fields[".".join(loc) or "request"] = err.get("msg", "invalid")
    return await quota_gate_error_handler(request, ValidationError(fields))


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("store.fault", exc_info=exc, extra={"path": request.url.path})
    return await quota_gate_error_handler(request, StoreUnavailableError())


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = NOT_FOUND if exc.status_code == 404 else UNKNOWN_ERROR
    message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
    if exc.status_code == 404 and message == "Not Found":
        message = f"Cannot {request.method} {request.url.path}"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": code, "message": message}},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QuotaGateError, quota_gate_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
