"""
Import wizard state machine.

A pure, synchronous reducer: ``wizard_reducer(state, action)`` returns a
new WizardState and never mutates its input. It performs no I/O and no
step-entry validation; callers decide when a transition is allowed.

Steps run upload -> review-items -> review-photos -> confirm -> summary,
and RESET goes back to upload. GO_TO_STEP may move in either direction.
"""

from typing import Callable

from models.import_wizard import ImportCandidate, WizardState
from models.wizard_actions import (
    ACTION_TYPES,
    AddResult,
    ExcludeItem,
    GoToStep,
    IncludeItem,
    Reset,
    SelectPhoto,
    SetItems,
    SetPhotoOptions,
    SetProcessing,
    UpdateItem,
)


INITIAL_WIZARD_STATE = WizardState()


def _update_item_at(
    state: WizardState,
    index: int,
    change: Callable[[ImportCandidate], ImportCandidate],
) -> WizardState:
    """Replace items[index] with change(item). Out-of-range index is a no-op."""
    if not 0 <= index < len(state.items):
        return state
    items = list(state.items)
    items[index] = change(items[index])
    return state.model_copy(update={"items": items})


def _set_items(state: WizardState, action: SetItems) -> WizardState:
    return state.model_copy(update={"items": list(action.items)})


def _update_item(state: WizardState, action: UpdateItem) -> WizardState:
    return _update_item_at(
        state, action.index, lambda item: item.model_copy(update=action.updates)
    )


def _exclude_item(state: WizardState, action: ExcludeItem) -> WizardState:
    return _update_item_at(
        state, action.index, lambda item: item.model_copy(update={"is_excluded": True})
    )


def _include_item(state: WizardState, action: IncludeItem) -> WizardState:
    return _update_item_at(
        state, action.index, lambda item: item.model_copy(update={"is_excluded": False})
    )


def _set_photo_options(state: WizardState, action: SetPhotoOptions) -> WizardState:
    return _update_item_at(
        state,
        action.index,
        lambda item: item.model_copy(update={"photo_options": list(action.photos)}),
    )


def _select_photo(state: WizardState, action: SelectPhoto) -> WizardState:
    return _update_item_at(
        state,
        action.index,
        lambda item: item.model_copy(update={"selected_photo_url": action.photo_url}),
    )


def _go_to_step(state: WizardState, action: GoToStep) -> WizardState:
    return state.model_copy(update={"step": action.step})


def _set_processing(state: WizardState, action: SetProcessing) -> WizardState:
    processing_index = state.processing_index if action.index is None else action.index
    return state.model_copy(
        update={"is_processing": action.is_processing, "processing_index": processing_index}
    )


def _add_result(state: WizardState, action: AddResult) -> WizardState:
    return state.model_copy(update={"results": [*state.results, action.result]})


def _reset(state: WizardState, action: Reset) -> WizardState:
    return INITIAL_WIZARD_STATE


_HANDLERS: dict[type, Callable] = {
    SetItems: _set_items,
    UpdateItem: _update_item,
    ExcludeItem: _exclude_item,
    IncludeItem: _include_item,
    SetPhotoOptions: _set_photo_options,
    SelectPhoto: _select_photo,
    GoToStep: _go_to_step,
    SetProcessing: _set_processing,
    AddResult: _add_result,
    Reset: _reset,
}

# Every action variant must have a transition
_unhandled = [t.__name__ for t in ACTION_TYPES if t not in _HANDLERS]
if _unhandled:
    raise RuntimeError(f"Wizard actions without a reducer handler: {_unhandled}")


def wizard_reducer(state: WizardState, action) -> WizardState:
    """
    Apply one action to the wizard state.

    Args:
        state: Current state (never modified)
        action: One of the wizard action models

    Returns:
        The next state. Anything that is not a wizard action returns
        ``state`` itself.
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        return state
    return handler(state, action)
