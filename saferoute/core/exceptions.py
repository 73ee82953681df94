"""
API-facing errors

Raised from routers only. Algorithm and client errors
(``SafeRoutingError`` and subclasses) are translated at the router.
"""
from fastapi import HTTPException
from typing import Optional, Any


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Any] = None,
    ):
        super().__init__(status_code=status_code, detail={
            "error_code": error_code,
            "message": message,
            "details": details,
        })
        self.error_code = error_code
        self.message = message
        self.details = details


class NotFoundError(AppException):
    """Unknown incident or report id (404)"""
    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            status_code=404,
            error_code=f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found: {resource_id}",
            details={"id": resource_id},
        )


class ValidationError(AppException):
    """Semantically invalid query, e.g. an inverted date range (400)"""
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(
            status_code=400,
            error_code="VALIDATION_ERROR",
            message=message,
            details=details,
        )


class NoRoutesAvailableError(AppException):
    """No route geometry could be produced for the request (422)"""
    def __init__(self, message: str):
        super().__init__(
            status_code=422,
            error_code="NO_ROUTES",
            message=message,
        )
