"""
Custom exceptions for the POI catalog.

Every error carries a stable ``ErrorCode`` and the HTTP status the API layer
answers with, so services can raise without knowing about FastAPI.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # GeoJSON interchange errors
    INVALID_GEOJSON = "INVALID_GEOJSON"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Store errors
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # Generic errors
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class PoiCatalogException(Exception):
    """Base exception for the POI catalog."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class FormatError(PoiCatalogException):
    """Raised when a GeoJSON document lacks the required top-level structure."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_GEOJSON,
            details=details,
            status_code=400
        )


class ValidationError(PoiCatalogException):
    """Raised when a single Feature or record misses a required field or has bad coordinates."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if field:
            details["field"] = field
        super().__init__(
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
            details=details,
            status_code=400
        )
        self.field = field


class NotFoundError(PoiCatalogException):
    """Raised when a referenced activity or favorite does not exist."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} {identifier} not found",
            error_code=ErrorCode.NOT_FOUND,
            details={"resource": resource, "id": identifier},
            status_code=404
        )


class ConflictError(PoiCatalogException):
    """Raised when a favorite already exists for the (user, activity) pair."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.CONFLICT,
            details=details,
            status_code=409
        )
