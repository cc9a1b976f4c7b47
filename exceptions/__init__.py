"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    UnauthorizedError,
    ExternalServiceError,
    RateLimitedError,
    StorageError,
    DatabaseError,

    # Catalog
    ProductNotFoundError,

    # Import wizard
    ImportCsvEmptyError,
    WizardStepError,
    WizardSessionNotFoundError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "UnauthorizedError",
    "ExternalServiceError",
    "RateLimitedError",
    "StorageError",
    "DatabaseError",

    # Catalog
    "ProductNotFoundError",

    # Import wizard
    "ImportCsvEmptyError",
    "WizardStepError",
    "WizardSessionNotFoundError",
]
