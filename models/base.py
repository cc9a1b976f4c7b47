"""
Base schemas and mixins for all models.
"""

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


class TimestampMixin(BaseModel):
    """Add timestamps to response models."""
    created_at: datetime
    updated_at: Optional[datetime] = None


class ErrorKind(str, Enum):
    """Machine-readable failure kinds returned by guarded actions."""
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    EXTERNAL_API_ERROR = "EXTERNAL_API_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ActionResult(BaseModel):
    """
    Discriminated success/failure envelope.

    success=True carries data; success=False carries an error kind and
    optional details for the caller to render.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    details: Optional[Any] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: ErrorKind | str, details: Any = None) -> "ActionResult":
        kind = error.value if isinstance(error, ErrorKind) else error
        return cls(success=False, error=kind, details=details)


def flatten_validation_error(error) -> dict:
    """
    Group pydantic error messages by top-level field.

    Returns:
        {"form_errors": [...], "field_errors": {"field": ["msg", ...]}}
    """
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for item in error.errors(include_url=False):
        loc = item.get("loc") or ()
        message = item.get("msg", "")
        if loc:
            field_errors.setdefault(str(loc[0]), []).append(message)
        else:
            form_errors.append(message)
    return {"form_errors": form_errors, "field_errors": field_errors}
