"""
Category API routes.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.category import CategoryResponse
from services.category_service import get_category_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
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


@router.get("", response_model=list[CategoryResponse])
async def list_categories():
    """All categories, oldest first. Used to pick categories in the import wizard."""
    try:
        return get_category_service().get_all()

    except Exception as e:
        return handle_error(e)
