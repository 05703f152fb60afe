"""Error Handlers — turn raised errors into the travel map's JSON error envelope.

Invariants:
    - TravelMapError → its own status and to_response() body
    - RequestValidationError → 400 VALIDATION_ERROR listing each bad field
    - Anything else → 500 INTERNAL_ERROR; driver or storage text never reaches
      the client

Design Decisions:
    - Guests hitting sign-in-only routes is routine: 401/403 log at info,
      other client errors at warning, server errors at error
    - Every log line carries method and path so a failed like or upload can
      be traced back to its route
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from travel_map.core.errors import TravelMapError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _request_extra(request: Request) -> dict:
    return {"method": request.method, "path": request.url.path}


def _log_level(http_status: int) -> int:
    if http_status >= 500:
        return logging.ERROR
    if http_status in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
        return logging.INFO
    return logging.WARNING


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(TravelMapError)
    async def travel_map_error_handler(request: Request, exc: TravelMapError):
        logger.log(
            _log_level(exc.http_status),
            f"{request.method} {request.url.path} -> {exc.code}: {exc.message}",
            extra={
                **_request_extra(request),
                "error_code": exc.code,
                "category": exc.category.value,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        body = _build_validation_error_response(exc)
        fields = [d["field"] for d in body["error"]["details"]]
        logger.warning(
            f"Rejected {request.method} {request.url.path}: bad fields {fields}",
            extra=_request_extra(request),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content=body,
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled {type(exc).__name__} on {request.method} "
            f"{request.url.path}: {exc}",
            exc_info=True,
            extra=_request_extra(request),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "The travel map server hit an unexpected error",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Request data failed validation",
            "category": "validation",
            "severity": ErrorSeverity.WARNING.value,
            "details": [
                {
                    # Drop the "body"/"query" prefix; clients know field names.
                    "field": ".".join(str(loc) for loc in e["loc"][1:])
                    or str(e["loc"][0]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
