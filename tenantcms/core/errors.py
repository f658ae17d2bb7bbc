# tenantcms/core/errors.py
# Domain error taxonomy + FastAPI handlers
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)


class DomainError(Exception):
    status_code = 500
    code = "internal"
    default_message = "Internal error"

    def __init__(self, message: str | None = None, *, errors: dict[str, list[str]] | None = None):
        self.message = message or self.default_message
        self.errors = errors or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.code, "detail": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class Unauthorized(DomainError):
    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required"


class Forbidden(DomainError):
    status_code = 403
    code = "forbidden"
    default_message = "Forbidden"


class NotFound(DomainError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class Conflict(DomainError):
    status_code = 409
    code = "conflict"
    default_message = "Conflict"


class InvalidArgument(DomainError):
    status_code = 422
    code = "invalid_argument"
    default_message = "Invalid argument"


class Internal(DomainError):
    pass


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def _handle_domain_error(request: Request, exc: DomainError):
        if exc.status_code >= 500:
            log.error("internal error on %s %s: %s", request.method, request.url.path, exc.message)
        # auth failures stay opaque: no field detail leaks out
        if isinstance(exc, (Unauthorized, Forbidden)):
            body = {"error": exc.code, "detail": exc.default_message}
        else:
            body = exc.to_dict()
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
        return JSONResponse(status_code=exc.status_code, content=body, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(request: Request, exc: RequestValidationError):
        errors: dict[str, list[str]] = {}
        for err in exc.errors():
            # drop the "body"/"query" prefix so keys match service-level field errors
            loc = [str(p) for p in err.get("loc", ())][1:] or ["request"]
            errors.setdefault(".".join(loc), []).append(err.get("msg", "invalid"))
        log.info("request validation failed on %s %s: %s", request.method, request.url.path, errors)
        body = InvalidArgument("Request validation failed", errors=errors).to_dict()
        return JSONResponse(status_code=InvalidArgument.status_code, content=body)

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception):
        # full detail goes to the log only
        log.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=Internal.status_code, content=Internal().to_dict())
