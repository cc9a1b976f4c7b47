"""
Custom exception classes for the application.

Services raise these; the import actions convert them into ActionResult
values and routers convert them into the JSON error envelope.
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_NOT_FOUND")
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


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


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


class UnauthorizedError(AppError):
    """Caller is not an admin (401)."""

    def __init__(self):
        super().__init__(
            code="UNAUTHORIZED",
            message="Admin session required",
            status_code=401
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
            code="EXTERNAL_API_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


class RateLimitedError(ExternalServiceError):
    """External service answered 429."""

    def __init__(self, service: str, message: str):
        super().__init__(
            service=service,
            message=message,
            details={"statusCode": 429}
        )
        self.code = "RATE_LIMITED"
        self.status_code = 429


class StorageError(AppError):
    """Object storage upload failed (502)."""

    def __init__(
        self,
        bucket: str,
        path: str,
        message: str
    ):
        super().__init__(
            code="STORAGE_ERROR",
            message=message,
            status_code=502,
            details={"bucket": bucket, "path": path}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# CATALOG ERRORS
# ===================

class ProductNotFoundError(NotFoundError):
    """Catalog item not found."""

    def __init__(self, product_id: str):
        super().__init__(
            resource="Product",
            identifier=product_id,
            code="PRODUCT_NOT_FOUND"
        )


# ===================
# IMPORT WIZARD ERRORS
# ===================

class ImportCsvEmptyError(ValidationError):
    """Uploaded CSV produced no import candidates."""

    def __init__(self):
        super().__init__(
            code="IMPORT_CSV_EMPTY",
            message="Nenhum item válido encontrado no arquivo. Verifique o formato."
        )


class WizardStepError(ValidationError):
    """Step-entry requirements are not met."""

    def __init__(self, step: str, message: str, row_indexes: Optional[list[int]] = None):
        super().__init__(
            code="WIZARD_STEP_BLOCKED",
            message=message,
            details={"step": step, "row_indexes": row_indexes or []}
        )


class WizardSessionNotFoundError(NotFoundError):
    """Wizard session expired or never existed."""

    def __init__(self, session_id: str):
        super().__init__(
            resource="Wizard session",
            identifier=session_id,
            code="WIZARD_SESSION_NOT_FOUND"
        )
