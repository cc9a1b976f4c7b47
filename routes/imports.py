"""
Bulk import API routes.

Guarded actions answer with the ActionResult envelope
({"success", "data", "error", "details"}); wizard session routes answer
with the session state and use the standard error envelope.

All routes require the X-Admin-Token header.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, Header, Query, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError as PydanticValidationError
import structlog

from exceptions import AppError, UnauthorizedError, ValidationError
from models.base import ActionResult, ErrorKind, flatten_validation_error
from models.import_wizard import (
    ImportParseResponse,
    StepChangeRequest,
    WizardSessionResponse,
)
from models.wizard_actions import parse_wizard_action
from parsers.import_csv_parser import IMPORT_CSV_TEMPLATE, parse_import_csv
from services.category_service import get_category_service
from services.import_service import get_import_service
from services.session_service import AdminSession
from services import wizard_session_store

logger = structlog.get_logger(__name__)

router = APIRouter()


ACTION_STATUS_CODES = {
    ErrorKind.UNAUTHORIZED.value: 401,
    ErrorKind.VALIDATION_ERROR.value: 422,
    ErrorKind.RATE_LIMITED.value: 429,
    ErrorKind.EXTERNAL_API_ERROR.value: 502,
    ErrorKind.STORAGE_ERROR.value: 502,
    ErrorKind.INTERNAL_ERROR.value: 500,
}


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


def action_response(result: ActionResult) -> JSONResponse:
    """ActionResult as JSON, with an HTTP status matching its error kind."""
    status_code = 200 if result.success else ACTION_STATUS_CODES.get(result.error, 400)
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))


# ===================
# DEPENDENCIES
# ===================

def get_admin_session(
    x_admin_token: Optional[str] = Header(None, alias="X-Admin-Token")
) -> AdminSession:
    return AdminSession(x_admin_token)


def _require_admin(session: AdminSession) -> None:
    if not session.is_admin():
        raise UnauthorizedError()


async def _read_csv_upload(file: UploadFile) -> str:
    content = await file.read()
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError("Arquivo deve estar codificado em UTF-8")


def _session_response(session_id: str, wizard) -> WizardSessionResponse:
    return WizardSessionResponse(session_id=session_id, state=wizard.state)


# ===================
# CSV
# ===================

@router.get("/template")
async def download_template():
    """CSV template with the expected header and example rows."""
    return PlainTextResponse(
        IMPORT_CSV_TEMPLATE,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="modelo-importacao.csv"'}
    )


@router.post("/parse", response_model=ImportParseResponse)
async def parse_csv(
    file: UploadFile = File(..., description="CSV with nome, categoria, valor, tipo columns"),
    session: AdminSession = Depends(get_admin_session),
):
    """
    Parse a CSV upload into import candidates.

    Nothing is saved. Invalid rows are returned with their errors and
    start excluded.
    """
    try:
        _require_admin(session)
        text = await _read_csv_upload(file)
        parsed = parse_import_csv(text)

        return ImportParseResponse(
            items=parsed.items,
            errors=parsed.errors,
            valid_count=parsed.valid_count,
            invalid_count=parsed.invalid_count
        )

    except Exception as e:
        return handle_error(e)


# ===================
# GUARDED ACTIONS
# ===================

@router.post("/photos/search")
def search_photos(
    data: dict[str, Any] = Body(...),
    session: AdminSession = Depends(get_admin_session),
):
    """
    Search Pexels photos.

    Body: PhotoSearchRequest fields. 429 from Pexels answers RATE_LIMITED.
    """
    return action_response(get_import_service().search_photos(data, session))


@router.post("/photos/download")
def download_photo(
    data: dict[str, Any] = Body(...),
    session: AdminSession = Depends(get_admin_session),
):
    """
    Copy a Pexels photo into the photo bucket.

    Body: PhotoDownloadRequest fields. Returns data.image_path.
    """
    return action_response(get_import_service().download_and_store_photo(data, session))


@router.post("/bulk-create")
def bulk_create(
    data: dict[str, Any] = Body(...),
    session: AdminSession = Depends(get_admin_session),
):
    """
    Create catalog items one by one.

    Body: {"items": [...]} with 1 to 50 items. Returns one result per item
    in input order; failed items do not stop the batch.
    """
    return action_response(get_import_service().bulk_create_products(data, session))


# ===================
# WIZARD SESSIONS
# ===================

@router.post("/wizard", response_model=WizardSessionResponse, status_code=201)
async def create_wizard_session(
    file: UploadFile = File(..., description="Import CSV"),
    auto_match: bool = Query(True, description="Match categories by name"),
    session: AdminSession = Depends(get_admin_session),
):
    """
    Start a wizard session from a CSV upload.

    The session starts on review-items. With auto_match, items get the
    first category whose name contains their raw category label.
    """
    session_id = None
    try:
        _require_admin(session)
        text = await _read_csv_upload(file)

        session_id, wizard = wizard_session_store.create_session()
        wizard.load_csv(text)

        if auto_match:
            wizard.auto_match_categories(get_category_service().get_all())

        logger.info("wizard_session_created", session_id=session_id, items=len(wizard.state.items))
        return _session_response(session_id, wizard)

    except Exception as e:
        if session_id is not None:
            wizard_session_store.delete_session(session_id)
        return handle_error(e)


@router.get("/wizard/{session_id}", response_model=WizardSessionResponse)
async def get_wizard_session(
    session_id: str,
    session: AdminSession = Depends(get_admin_session),
):
    """Current state of a wizard session."""
    try:
        _require_admin(session)
        wizard = wizard_session_store.get_session(session_id)
        return _session_response(session_id, wizard)

    except Exception as e:
        return handle_error(e)


@router.post("/wizard/{session_id}/actions", response_model=WizardSessionResponse)
async def dispatch_wizard_action(
    session_id: str,
    data: dict[str, Any] = Body(...),
    session: AdminSession = Depends(get_admin_session),
):
    """
    Apply one wizard action, e.g. {"type": "EXCLUDE_ITEM", "index": 2}.

    Actions go straight to the reducer without step checks; use the
    /step route for validated navigation.
    """
    try:
        _require_admin(session)
        wizard = wizard_session_store.get_session(session_id)

        try:
            action = parse_wizard_action(data)
        except PydanticValidationError as e:
            raise ValidationError(
                "Ação inválida",
                details=flatten_validation_error(e)
            )

        wizard.dispatch(action)
        return _session_response(session_id, wizard)

    except Exception as e:
        return handle_error(e)


@router.post("/wizard/{session_id}/auto-match")
def auto_match_categories(
    session_id: str,
    session: AdminSession = Depends(get_admin_session),
):
    """Match categories for items that have none yet."""
    try:
        _require_admin(session)
        wizard = wizard_session_store.get_session(session_id)
        matched = wizard.auto_match_categories(get_category_service().get_all())

        return {
            "matched": matched,
            **_session_response(session_id, wizard).model_dump(mode="json")
        }

    except Exception as e:
        return handle_error(e)


@router.post("/wizard/{session_id}/items/{index}/photos/search")
def search_item_photos(
    session_id: str,
    index: int,
    per_page: int = Query(3, ge=1, le=15),
    session: AdminSession = Depends(get_admin_session),
):
    """
    Search photos for one item by name and store the options on it.

    Answers with the search ActionResult.
    """
    try:
        wizard = wizard_session_store.get_session(session_id)
        return action_response(wizard.search_photos(index, session, per_page=per_page))

    except Exception as e:
        return handle_error(e)


@router.post("/wizard/{session_id}/step", response_model=WizardSessionResponse)
async def change_wizard_step(
    session_id: str,
    data: StepChangeRequest,
    session: AdminSession = Depends(get_admin_session),
):
    """
    Navigate to a step.

    Moving forward checks the entry rules of every step entered and
    answers 422 WIZARD_STEP_BLOCKED with the offending row indexes.
    """
    try:
        _require_admin(session)
        wizard = wizard_session_store.get_session(session_id)
        wizard.go_to_step(data.step)
        return _session_response(session_id, wizard)

    except Exception as e:
        return handle_error(e)


@router.post("/wizard/{session_id}/confirm")
def confirm_wizard(
    session_id: str,
    session: AdminSession = Depends(get_admin_session),
):
    """
    Create catalog items for every included item.

    Answers with the bulk-create ActionResult; on success the session
    moves to summary.
    """
    try:
        wizard = wizard_session_store.get_session(session_id)
        return action_response(wizard.confirm(session))

    except Exception as e:
        return handle_error(e)


@router.get("/wizard/{session_id}/summary")
async def get_wizard_summary(
    session_id: str,
    session: AdminSession = Depends(get_admin_session),
):
    """Created and failed counts plus a breakdown of the submitted items."""
    try:
        _require_admin(session)
        wizard = wizard_session_store.get_session(session_id)
        summary = wizard.summary()

        return {
            **summary,
            "created_items": [r.model_dump(mode="json") for r in summary["created_items"]],
            "failed_items": [r.model_dump(mode="json") for r in summary["failed_items"]],
        }

    except Exception as e:
        return handle_error(e)


@router.post("/wizard/{session_id}/reset", response_model=WizardSessionResponse)
async def reset_wizard(
    session_id: str,
    session: AdminSession = Depends(get_admin_session),
):
    """Back to upload with an empty state."""
    try:
        _require_admin(session)
        wizard = wizard_session_store.get_session(session_id)
        wizard.reset()
        return _session_response(session_id, wizard)

    except Exception as e:
        return handle_error(e)


@router.delete("/wizard/{session_id}", status_code=204)
async def delete_wizard_session(
    session_id: str,
    session: AdminSession = Depends(get_admin_session),
):
    """Discard a wizard session."""
    try:
        _require_admin(session)
        wizard_session_store.delete_session(session_id)
        return Response(status_code=204)

    except Exception as e:
        return handle_error(e)
