"""
Custom exception classes for the application.

Orchestrators fold backend failures into result objects; these errors are
reserved for problems the caller has to fix (configuration, busy operation,
unreadable cache).
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "ADMIN_CLIENT_UNAVAILABLE")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource or running operation (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


# ===================
# BACKEND ERRORS
# ===================

class BackendUnavailableError(ExternalServiceError):
    """A backend operation is not available on this variant."""

    def __init__(self, backend: str, message: str):
        super().__init__(
            service=backend,
            message=message,
            details={"backend": backend}
        )
        self.code = "BACKEND_UNAVAILABLE"


class AdminClientUnavailableError(AppError):
    """Service role key missing; destructive operations refused."""

    def __init__(self):
        super().__init__(
            code="ADMIN_CLIENT_UNAVAILABLE",
            message="Admin client not available. Service role key is required.",
            status_code=503,
            details={"setting": "SUPABASE_SERVICE_KEY"}
        )


class UnknownBackendError(ValidationError):
    """Backend name is not destination or legacy."""

    def __init__(self, backend: str):
        super().__init__(
            code="UNKNOWN_BACKEND",
            message="Backend must be destination or legacy",
            details={"provided": backend, "valid": ["destination", "legacy"]}
        )


class UnknownCollectionError(ValidationError):
    """Collection is not one the admin tools manage."""

    def __init__(self, collection: str, valid: list[str]):
        super().__init__(
            code="UNKNOWN_COLLECTION",
            message=f"Collection must be one of: {', '.join(valid)}",
            details={"provided": collection, "valid": valid}
        )


# ===================
# OPERATION ERRORS
# ===================

class OperationInProgressError(ConflictError):
    """The same admin operation is already running."""

    def __init__(self, operation: str):
        super().__init__(
            code="OPERATION_IN_PROGRESS",
            message=f"Operation '{operation}' is already running",
            details={"operation": operation}
        )


class LocalCacheError(AppError):
    """Local cache export could not be read (422)."""

    def __init__(self, path: str, message: str):
        super().__init__(
            code="LOCAL_CACHE_UNREADABLE",
            message=f"Local cache could not be read: {message}",
            status_code=422,
            details={"path": path}
        )
