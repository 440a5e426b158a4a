"""Problem+JSON rendering and global exception handlers.

Every error response uses the `application/problem+json` media type and the
envelope `{title, status, message, code, errors?, detail?}`.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cinerate.logic.errors import ApiError

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def problem_response(problem: dict, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        problem,
        status_code=int(problem.get("status", 500)),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers,
    )


async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status >= 500:
        logger.error("api_error code=%s path=%s", exc.code, request.url.path, exc_info=exc)
    else:
        logger.info("api_error status=%s code=%s path=%s", exc.status, exc.code, request.url.path)
    return problem_response(exc.to_problem())


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    status_code = int(exc.status_code or 500)
    problem = {
        "title": "Error",
        "status": status_code,
        "message": str(exc.detail or ""),
        "code": _HTTP_CODES.get(status_code, "HTTP_ERROR"),
    }
    headers = dict(exc.headers) if exc.headers else None
    return problem_response(problem, headers=headers)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        errors.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    problem = {
        "title": "Invalid Request",
        "status": 400,
        "message": "Invalid request data.",
        "code": "VALIDATION_ERROR",
        "errors": errors,
    }
    return problem_response(problem)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return problem_response(
        {
            "title": "Internal Server Error",
            "status": 500,
            "message": "Internal server error.",
            "code": "INTERNAL_ERROR",
        }
    )


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_response",
    "handle_api_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
