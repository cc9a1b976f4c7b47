"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    TimestampMixin,
    ErrorKind,
    ActionResult,
)
from models.product import (
    DonationType,
    CatalogItemCreate,
    ProductResponse,
)
from models.category import CategoryResponse
from models.import_wizard import (
    WizardStep,
    PhotoOption,
    ImportCandidate,
    ImportCandidateUpdate,
    ImportResult,
    WizardState,
    PhotoSearchRequest,
    PhotoDownloadRequest,
    BulkCreateItem,
    BulkCreateRequest,
    ImportParseResponse,
    WizardSessionResponse,
    StepChangeRequest,
)
from models.wizard_actions import (
    SetItems,
    UpdateItem,
    ExcludeItem,
    IncludeItem,
    SetPhotoOptions,
    SelectPhoto,
    GoToStep,
    SetProcessing,
    AddResult,
    Reset,
    WizardAction,
    parse_wizard_action,
)

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",
    "ErrorKind",
    "ActionResult",

    # Catalog
    "DonationType",
    "CatalogItemCreate",
    "ProductResponse",
    "CategoryResponse",

    # Import wizard
    "WizardStep",
    "PhotoOption",
    "ImportCandidate",
    "ImportCandidateUpdate",
    "ImportResult",
    "WizardState",
    "PhotoSearchRequest",
    "PhotoDownloadRequest",
    "BulkCreateItem",
    "BulkCreateRequest",
    "ImportParseResponse",
    "WizardSessionResponse",
    "StepChangeRequest",

    # Wizard actions
    "SetItems",
    "UpdateItem",
    "ExcludeItem",
    "IncludeItem",
    "SetPhotoOptions",
    "SelectPhoto",
    "GoToStep",
    "SetProcessing",
    "AddResult",
    "Reset",
    "WizardAction",
    "parse_wizard_action",
]
