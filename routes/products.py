"""
Catalog item API routes.

Items are created through the bulk import; this router only reads them.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.product import ProductResponse
from services.product_service import get_product_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


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


# ===================
# ROUTES
# ===================

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str):
    """
    Get a single catalog item by ID.

    Returns 404 PRODUCT_NOT_FOUND if it doesn't exist.
    """
    try:
        service = get_product_service()
        return service.get_by_id(product_id)

    except Exception as e:
        return handle_error(e)
