"""
Bulk import wizard models.

ImportCandidate, ImportResult and WizardState are immutable values: the
wizard reducer produces new copies instead of mutating them. Request
schemas for the guarded import actions live here too.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.base import BaseSchema
from models.product import DonationType, validate_uuid


PEXELS_IMAGE_HOST = "https://images.pexels.com"
BULK_CREATE_MAX_ITEMS = 50


class WizardStep(str, Enum):
    """The five linear wizard stages."""
    UPLOAD = "upload"
    REVIEW_ITEMS = "review-items"
    REVIEW_PHOTOS = "review-photos"
    CONFIRM = "confirm"
    SUMMARY = "summary"


class WizardModel(BaseModel):
    """Frozen base for wizard state values."""
    model_config = ConfigDict(frozen=True)


class PhotoOption(WizardModel):
    """A candidate photo returned by the photo search."""
    id: int
    src: str = ""
    src_large: str = ""
    alt: str = ""
    photographer: str = ""


class ImportCandidate(WizardModel):
    """
    One parsed CSV row awaiting inclusion in a bulk-create batch.

    selected_photo_url: None means undecided, "" means explicitly skipped.
    is_valid and validation_errors are computed once at parse time.
    """
    row_index: int = Field(..., ge=0)
    name: str
    category_name_raw: str = ""
    category_id: Optional[str] = None
    target_amount: int = Field(0, ge=0, description="Amount in cents")
    donation_type: DonationType = DonationType.MONETARY
    description: str = ""
    photo_options: list[PhotoOption] = Field(default_factory=list)
    selected_photo_url: Optional[str] = None
    is_valid: bool = True
    validation_errors: list[str] = Field(default_factory=list)
    is_excluded: bool = False


class ImportCandidateUpdate(WizardModel):
    """
    Editable subset of ImportCandidate.

    row_index and the parse-time validation fields cannot be changed.
    Only keys that were actually provided are applied.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Optional[str] = None
    category_name_raw: Optional[str] = None
    category_id: Optional[str] = None
    target_amount: Optional[int] = Field(None, ge=0)
    donation_type: Optional[DonationType] = None
    description: Optional[str] = None
    photo_options: Optional[list[PhotoOption]] = None
    selected_photo_url: Optional[str] = None
    is_excluded: Optional[bool] = None

    @field_validator(
        "name",
        "category_name_raw",
        "target_amount",
        "donation_type",
        "description",
        "photo_options",
        "is_excluded",
    )
    @classmethod
    def provided_value_not_null(cls, v):
        """Only category_id and selected_photo_url may be cleared to None."""
        if v is None:
            raise ValueError("Campo não pode ser nulo")
        return v

    def as_update(self) -> dict:
        """Provided fields only, with nested models kept as models."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class ImportResult(WizardModel):
    """Outcome of one attempted catalog item creation."""
    row_index: int
    name: str
    success: bool
    product_id: Optional[str] = None
    error: Optional[str] = None


class WizardState(WizardModel):
    """Whole wizard session state."""
    step: WizardStep = WizardStep.UPLOAD
    items: list[ImportCandidate] = Field(default_factory=list)
    results: list[ImportResult] = Field(default_factory=list)
    is_processing: bool = False
    processing_index: int = 0


# ===================
# ACTION REQUESTS
# ===================

class PhotoSearchRequest(BaseSchema):
    """Search the photo service for an item name."""

    query: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Free-text query, usually the item name"
    )
    per_page: int = Field(
        3,
        ge=1,
        le=15,
        description="Number of photos to return"
    )


class PhotoDownloadRequest(BaseSchema):
    """Download a searched photo and store it in the photo bucket."""

    photo_url: str = Field(
        ...,
        min_length=1,
        description="Large photo URL from a search result"
    )
    product_name: str = Field(
        ...,
        min_length=1,
        description="Item name, used for logging"
    )

    @field_validator("photo_url")
    @classmethod
    def photo_url_from_pexels(cls, v: str) -> str:
        """Only photos hosted by Pexels can be downloaded."""
        if not v.startswith(PEXELS_IMAGE_HOST):
            raise ValueError("URL deve ser de images.pexels.com")
        return v


class BulkCreateItem(BaseSchema):
    """One finalized wizard item ready for creation."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=1000)
    donation_type: DonationType
    target_amount: Optional[int] = Field(None, gt=0)
    category_id: str
    photo_url: str = Field("", description="Selected photo URL; empty when skipped")
    is_published: bool = True
    row_index: Optional[int] = Field(
        None,
        ge=0,
        description="Source CSV row; results fall back to the batch position"
    )

    @field_validator("category_id")
    @classmethod
    def category_id_is_uuid(cls, v: str) -> str:
        return validate_uuid(v)

    @model_validator(mode="after")
    def monetary_requires_target(self) -> "BulkCreateItem":
        if self.donation_type == DonationType.MONETARY and not self.target_amount:
            raise ValueError("Valor é obrigatório para produtos monetários")
        return self


class BulkCreateRequest(BaseSchema):
    """A batch of 1 to 50 finalized items."""

    items: list[BulkCreateItem] = Field(
        ...,
        min_length=1,
        max_length=BULK_CREATE_MAX_ITEMS
    )


# ===================
# API RESPONSES
# ===================

class ImportParseResponse(BaseModel):
    """Parsed CSV upload."""
    items: list[ImportCandidate]
    errors: list[str] = Field(default_factory=list)
    valid_count: int = 0
    invalid_count: int = 0


class WizardSessionResponse(BaseModel):
    """A stored wizard session and its current state."""
    session_id: str
    state: WizardState


class StepChangeRequest(BaseSchema):
    """Navigate the wizard to a step."""
    step: WizardStep
