"""
Error handlers for the FastAPI application.

Every failure leaves the API as a ``StandardErrorResponse`` body carrying the
request id. Catalog exceptions keep their own code and status; request body
validation answers 422; unexpected exceptions answer 500 without leaking
internals.
"""
from collections import Counter
import logging
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from poi_catalog.core.exceptions import ErrorCode, PoiCatalogException
from poi_catalog.schemas.base import StandardErrorResponse

logger = logging.getLogger(__name__)

# Status codes of framework-raised HTTP errors with a catalog counterpart
HTTP_STATUS_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
}

RECENT_WINDOW_S = 3600


class ErrorHandler:
    """Builds error responses and counts them per error code."""

    def __init__(self):
        self.error_counts: Counter = Counter()
        self.last_seen: Dict[str, float] = {}

    def _respond(
        self,
        request: Request,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        exc_info: bool = False,
    ) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "unknown")
        level = logging.ERROR if status_code >= 500 else logging.WARNING
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {status_code} {error_code}: {message}",
            exc_info=exc_info,
            extra={
                "request_id": request_id,
                "error_code": error_code,
                "status_code": status_code,
                "details": details,
            },
        )
        self._track_error(error_code)

        body = StandardErrorResponse(
            error_code=error_code,
            message=message,
            details=details,
            request_id=request_id,
        )
        return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

    async def handle_catalog_exception(self, request: Request, exc: PoiCatalogException) -> JSONResponse:
        return self._respond(
            request,
            exc.status_code,
            exc.error_code.value,
            exc.message,
            details=exc.details or None,
        )

    async def handle_validation_error(self, request: Request, exc: RequestValidationError) -> JSONResponse:
        """Request bodies or parameters rejected by pydantic, one entry per field."""
        errors = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        return self._respond(
            request,
            422,
            ErrorCode.VALIDATION_ERROR.value,
            "Request validation failed",
            details={"validation_errors": errors},
        )

    async def handle_http_exception(self, request: Request, exc: StarletteHTTPException) -> JSONResponse:
        error_code = HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_SERVER_ERROR)
        return self._respond(request, exc.status_code, error_code.value, str(exc.detail))

    async def handle_generic_exception(self, request: Request, exc: Exception) -> JSONResponse:
        return self._respond(
            request,
            500,
            ErrorCode.INTERNAL_SERVER_ERROR.value,
            "An internal server error occurred",
            exc_info=True,
        )

    def _track_error(self, error_code: str) -> None:
        self.error_counts[error_code] += 1
        self.last_seen[error_code] = time.time()

    def get_error_statistics(self) -> Dict[str, Any]:
        """Error totals since startup and the codes seen within the last hour."""
        now = time.time()
        return {
            "error_counts": dict(self.error_counts),
            "recent_errors": {
                code: count
                for code, count in self.error_counts.items()
                if now - self.last_seen.get(code, 0) < RECENT_WINDOW_S
            },
            "total_errors": sum(self.error_counts.values()),
        }


error_handler = ErrorHandler()


def setup_error_handlers(app: FastAPI) -> None:
    """Register the catalog's error handlers on ``app``."""
    app.add_exception_handler(PoiCatalogException, error_handler.handle_catalog_exception)
    app.add_exception_handler(RequestValidationError, error_handler.handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, error_handler.handle_http_exception)
    app.add_exception_handler(Exception, error_handler.handle_generic_exception)
