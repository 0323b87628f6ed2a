"""
HTTP middleware: request ids and the error-to-response mapping.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from backend.app.core.errors import AppError
from backend.app.observability.logging import log_event

REQUEST_ID_HEADER = "X-Request-ID"


def setup_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log_event(
            "app_error",
            level=logging.ERROR if exc.status_code >= 500 else logging.WARNING,
            request_id=getattr(request.state, "request_id", ""),
            path=request.url.path,
            status=exc.status_code,
            error_class=type(exc).__name__,
            error=exc.detail,
        )
        return JSONResponse(status_code=exc.status_code, content={"message": exc.public_message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
        log_event(
            "request_invalid",
            level=logging.WARNING,
            request_id=getattr(request.state, "request_id", ""),
            path=request.url.path,
            fields=fields,
        )
        return JSONResponse(status_code=400, content={"message": "Invalid request body"})

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log_event(
            "unhandled_exception",
            level=logging.ERROR,
            request_id=getattr(request.state, "request_id", ""),
            path=request.url.path,
            error_class=type(exc).__name__,
            error=str(exc),
        )
        return JSONResponse(status_code=500, content={"message": "Server error"})
