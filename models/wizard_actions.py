"""
Wizard action vocabulary.

Each action is a frozen model tagged by a literal ``type`` so a JSON body
can be parsed into the right variant with ``parse_wizard_action``.
"""

from typing import Annotated, Any, Literal, Optional, Union, get_args

from pydantic import Field, TypeAdapter, field_validator

from models.import_wizard import (
    ImportCandidate,
    ImportCandidateUpdate,
    ImportResult,
    PhotoOption,
    WizardModel,
    WizardStep,
)


class SetItems(WizardModel):
    type: Literal["SET_ITEMS"] = "SET_ITEMS"
    items: list[ImportCandidate]


class UpdateItem(WizardModel):
    """Merge ``updates`` into one item; keys are checked on construction."""
    type: Literal["UPDATE_ITEM"] = "UPDATE_ITEM"
    index: int
    updates: dict[str, Any]

    @field_validator("updates")
    @classmethod
    def updates_are_editable_fields(cls, v: dict[str, Any]) -> dict[str, Any]:
        return ImportCandidateUpdate.model_validate(v).as_update()


class ExcludeItem(WizardModel):
    type: Literal["EXCLUDE_ITEM"] = "EXCLUDE_ITEM"
    index: int


class IncludeItem(WizardModel):
    type: Literal["INCLUDE_ITEM"] = "INCLUDE_ITEM"
    index: int


class SetPhotoOptions(WizardModel):
    type: Literal["SET_PHOTO_OPTIONS"] = "SET_PHOTO_OPTIONS"
    index: int
    photos: list[PhotoOption]


class SelectPhoto(WizardModel):
    """photo_url="" records an explicit skip."""
    type: Literal["SELECT_PHOTO"] = "SELECT_PHOTO"
    index: int
    photo_url: str


class GoToStep(WizardModel):
    type: Literal["GO_TO_STEP"] = "GO_TO_STEP"
    step: WizardStep


class SetProcessing(WizardModel):
    type: Literal["SET_PROCESSING"] = "SET_PROCESSING"
    is_processing: bool
    index: Optional[int] = None


class AddResult(WizardModel):
    type: Literal["ADD_RESULT"] = "ADD_RESULT"
    result: ImportResult


class Reset(WizardModel):
    type: Literal["RESET"] = "RESET"


WizardAction = Annotated[
    Union[
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
    ],
    Field(discriminator="type"),
]

# Variants of the union above, unwrapped from Annotated
ACTION_TYPES: tuple[type, ...] = get_args(get_args(WizardAction)[0])

_action_adapter: TypeAdapter = TypeAdapter(WizardAction)


def parse_wizard_action(payload: dict) -> WizardModel:
    """Validate a JSON payload into its action variant."""
    return _action_adapter.validate_python(payload)
