"""
Import wizard session.

Owns one WizardState and drives it through the reducer. Every state
change goes through ``dispatch`` so registered listeners see each
intermediate state, including per-item progress while a batch runs.

Step-entry rules (forward moves only, backward is always allowed):
    review-items   needs at least one parsed item
    review-photos  needs an included item, and a category on every included item
    confirm        needs a photo decision (chosen or skipped) on every included item
    summary        needs the batch to have run
"""

import threading
from typing import Any, Callable, Optional
import structlog

from exceptions import ImportCsvEmptyError, ValidationError, WizardStepError
from models.base import ActionResult
from models.category import CategoryResponse
from models.import_wizard import ImportCandidate, WizardState, WizardStep
from models.product import DonationType
from models.wizard_actions import (
    AddResult,
    GoToStep,
    Reset,
    SelectPhoto,
    SetItems,
    SetPhotoOptions,
    SetProcessing,
    UpdateItem,
)
from parsers.import_csv_parser import ImportCsvParseResult, parse_import_csv
from services.category_service import match_category
from services.import_service import ImportService, get_import_service
from services.wizard_reducer import INITIAL_WIZARD_STATE, wizard_reducer
from utils.format_utils import format_currency

logger = structlog.get_logger(__name__)


STEP_ORDER = [
    WizardStep.UPLOAD,
    WizardStep.REVIEW_ITEMS,
    WizardStep.REVIEW_PHOTOS,
    WizardStep.CONFIRM,
    WizardStep.SUMMARY,
]

TYPE_LABELS = {
    DonationType.MONETARY: "Monetário",
    DonationType.PHYSICAL: "Físico",
}

Listener = Callable[[WizardState], None]


class ImportWizardSession:
    """
    One admin's pass through the import wizard.

    Args:
        import_service: Guarded import actions (defaults to the singleton)
        state: Starting state, normally the initial one
    """

    def __init__(
        self,
        import_service: Optional[ImportService] = None,
        state: WizardState = INITIAL_WIZARD_STATE,
    ):
        self._import_service = import_service
        self._state = state
        self._listeners: list[Listener] = []
        self._confirm_lock = threading.Lock()

    @property
    def import_service(self) -> ImportService:
        if self._import_service is None:
            self._import_service = get_import_service()
        return self._import_service

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def active_items(self) -> list[ImportCandidate]:
        """Items that will be part of the batch."""
        return [item for item in self._state.items if not item.is_excluded]

    # ===================
    # STATE
    # ===================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action) -> WizardState:
        """Apply an action and notify listeners."""
        self._state = wizard_reducer(self._state, action)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def reset(self) -> WizardState:
        return self.dispatch(Reset())

    # ===================
    # UPLOAD / REVIEW ITEMS
    # ===================

    def load_csv(self, csv_text: str) -> ImportCsvParseResult:
        """
        Parse an import CSV and move to item review.

        Raises:
            ImportCsvEmptyError: No rows could be read
        """
        parsed = parse_import_csv(csv_text)
        if not parsed.items:
            logger.warning("wizard_csv_empty", errors=parsed.errors)
            raise ImportCsvEmptyError()

        self.dispatch(SetItems(items=parsed.items))
        self.dispatch(GoToStep(step=WizardStep.REVIEW_ITEMS))

        logger.info(
            "wizard_csv_loaded",
            items=len(parsed.items),
            valid=parsed.valid_count,
            invalid=parsed.invalid_count
        )
        return parsed

    def update_item(self, index: int, updates: dict[str, Any]) -> WizardState:
        return self.dispatch(UpdateItem(index=index, updates=updates))

    def auto_match_categories(self, categories: list[CategoryResponse]) -> int:
        """
        Fill in category_id from each item's raw category label.

        Items that already have a category are left alone.

        Returns:
            Number of items matched
        """
        matched = 0
        for index, item in enumerate(self._state.items):
            if item.category_id:
                continue
            category = match_category(item.category_name_raw, categories)
            if category is None:
                continue
            self.dispatch(UpdateItem(index=index, updates={"category_id": category.id}))
            matched += 1

        logger.info("wizard_categories_matched", matched=matched, items=len(self._state.items))
        return matched

    # ===================
    # REVIEW PHOTOS
    # ===================

    def search_photos(self, index: int, session, per_page: int = 3) -> ActionResult:
        """
        Search photos for one item by its name.

        Options are stored on the item only when the search succeeds.
        """
        item = self._item_at(index)
        result = self.import_service.search_photos(
            {"query": item.name, "per_page": per_page},
            session,
        )
        if result.success:
            self.dispatch(SetPhotoOptions(index=index, photos=result.data["photos"]))
        else:
            logger.info("wizard_photo_search_failed", row_index=item.row_index, error=result.error)
        return result

    def select_photo(self, index: int, photo_url: str) -> WizardState:
        return self.dispatch(SelectPhoto(index=index, photo_url=photo_url))

    def skip_photo(self, index: int) -> WizardState:
        return self.dispatch(SelectPhoto(index=index, photo_url=""))

    # ===================
    # NAVIGATION
    # ===================

    def go_to_step(self, step: WizardStep) -> WizardState:
        """
        Move to a step, checking entry rules when moving forward.

        Raises:
            WizardStepError: An entry rule of the target (or a skipped) step fails
        """
        step = WizardStep(step)
        current = STEP_ORDER.index(self._state.step)
        target = STEP_ORDER.index(step)

        for entered in STEP_ORDER[current + 1:target + 1]:
            self._check_entry(entered)

        return self.dispatch(GoToStep(step=step))

    def _check_entry(self, step: WizardStep) -> None:
        if step == WizardStep.REVIEW_ITEMS:
            if not self._state.items:
                raise WizardStepError(step.value, "Nenhum item carregado")
            return

        if step == WizardStep.REVIEW_PHOTOS:
            active = self.active_items
            if not active:
                raise WizardStepError(step.value, "Nenhum item selecionado para importação")
            missing = [item.row_index for item in active if not item.category_id]
            if missing:
                raise WizardStepError(step.value, "Selecione a categoria de todos os itens", missing)
            return

        if step == WizardStep.CONFIRM:
            undecided = [
                item.row_index for item in self.active_items
                if item.selected_photo_url is None
            ]
            if undecided:
                raise WizardStepError(step.value, "Escolha ou pule a foto de todos os itens", undecided)
            return

        if step == WizardStep.SUMMARY:
            if not self._state.results:
                raise WizardStepError(step.value, "Nenhum resultado disponível")

    # ===================
    # CONFIRM / SUMMARY
    # ===================

    def confirm(self, session) -> ActionResult:
        """
        Create catalog items for every included item.

        Progress is dispatched per item. A whole-batch rejection leaves the
        wizard on the confirm step with processing cleared.

        Raises:
            WizardStepError: Not on the confirm step, the batch already ran,
                or another confirm is still running
        """
        if not self._confirm_lock.acquire(blocking=False):
            raise WizardStepError(WizardStep.CONFIRM.value, "Importação em andamento")
        try:
            return self._run_confirm(session)
        finally:
            self._confirm_lock.release()

    def _run_confirm(self, session) -> ActionResult:
        if self._state.step != WizardStep.CONFIRM:
            raise WizardStepError(
                WizardStep.CONFIRM.value,
                "A importação só pode ser executada na etapa de confirmação"
            )
        if self._state.results:
            raise WizardStepError(WizardStep.CONFIRM.value, "Importação já executada")

        batch = [self._to_bulk_item(item) for item in self.active_items]

        self.dispatch(SetProcessing(is_processing=True, index=0))

        def on_result(position, result) -> None:
            self.dispatch(SetProcessing(is_processing=True, index=position))
            self.dispatch(AddResult(result=result))

        try:
            outcome = self.import_service.bulk_create_products(
                {"items": batch}, session, on_result=on_result
            )
        finally:
            self.dispatch(SetProcessing(is_processing=False))

        if not outcome.success:
            logger.warning("wizard_confirm_rejected", error=outcome.error)
            return outcome

        self.dispatch(GoToStep(step=WizardStep.SUMMARY))
        return outcome

    def summary(self) -> dict:
        """Result counts plus a breakdown of what was submitted."""
        results = self._state.results
        active = self.active_items

        type_breakdown: dict[str, int] = {}
        for item in active:
            label = TYPE_LABELS[item.donation_type]
            type_breakdown[label] = type_breakdown.get(label, 0) + 1

        total_target = sum(
            item.target_amount for item in active
            if item.donation_type == DonationType.MONETARY
        )

        return {
            "total": len(results),
            "created": sum(1 for r in results if r.success),
            "failed": sum(1 for r in results if not r.success),
            "type_breakdown": type_breakdown,
            "total_target_amount": total_target,
            "total_target_formatted": format_currency(total_target),
            "created_items": [r for r in results if r.success],
            "failed_items": [r for r in results if not r.success],
        }

    # ===================
    # HELPERS
    # ===================

    def _item_at(self, index: int) -> ImportCandidate:
        if not 0 <= index < len(self._state.items):
            raise ValidationError(
                f"Item {index} não existe",
                details={"index": index}
            )
        return self._state.items[index]

    @staticmethod
    def _to_bulk_item(item: ImportCandidate) -> dict:
        return {
            "row_index": item.row_index,
            "name": item.name,
            "description": item.description,
            "donation_type": item.donation_type,
            "target_amount": (
                item.target_amount if item.donation_type == DonationType.MONETARY else None
            ),
            "category_id": item.category_id,
            "photo_url": item.selected_photo_url or "",
            "is_published": True,
        }
