"""
Catalog item (product) service.

Handles creation and lookup of catalog items and exposes
``create_catalog_item``, the guarded action the bulk import uses.
"""

from typing import Any, Optional
import structlog
from pydantic import ValidationError as PydanticValidationError

from config import get_supabase_client
from models.base import ActionResult, ErrorKind, flatten_validation_error
from models.product import CatalogItemCreate, DonationType, ProductResponse
from exceptions import (
    AppError,
    ProductNotFoundError,
    DatabaseError
)

logger = structlog.get_logger(__name__)


class ProductService:
    """
    Catalog item business logic.

    Items live in ``products``; category links in ``product_categories``.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "products"
        self.categories_table = "product_categories"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_by_id(self, product_id: str) -> ProductResponse:
        """
        Get a single catalog item by ID.

        Raises:
            ProductNotFoundError: If the item doesn't exist
        """
        logger.debug("getting_product", product_id=product_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", product_id)
                .execute()
            )
        except Exception as e:
            logger.error(
                "get_product_failed",
                product_id=product_id,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

        if not result.data:
            raise ProductNotFoundError(product_id)

        return ProductResponse(**result.data[0])

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, data: CatalogItemCreate) -> ProductResponse:
        """
        Create a catalog item and link its categories.

        Physical items never store a target amount.

        Args:
            data: Validated item data

        Returns:
            Created ProductResponse

        Raises:
            DatabaseError: If either insert fails
        """
        logger.info("creating_product", name=data.name, donation_type=data.donation_type.value)

        insert_data = {
            "name": data.name,
            "description": data.description,
            "donation_type": data.donation_type.value,
            "target_amount": (
                data.target_amount if data.donation_type == DonationType.MONETARY else None
            ),
            "current_amount": 0,
            "is_published": data.is_published,
            "image_path": data.image_path,
        }

        try:
            result = (
                self.db.table(self.table)
                .insert(insert_data)
                .execute()
            )
            product = ProductResponse(**result.data[0])

            if data.category_ids:
                self.db.table(self.categories_table).insert([
                    {"product_id": product.id, "category_id": category_id}
                    for category_id in data.category_ids
                ]).execute()

        except Exception as e:
            logger.error(
                "create_product_failed",
                name=data.name,
                error=str(e)
            )
            raise DatabaseError("insert", str(e))

        logger.info(
            "product_created",
            product_id=product.id,
            categories=len(data.category_ids)
        )

        return product


# Singleton instance for convenience
_product_service: Optional[ProductService] = None


def get_product_service() -> ProductService:
    """Get or create ProductService instance."""
    global _product_service
    if _product_service is None:
        _product_service = ProductService()
    return _product_service


# ===================
# ACTIONS
# ===================

def create_catalog_item(
    payload: Any,
    session,
    service: Optional[ProductService] = None,
) -> ActionResult:
    """
    Guarded catalog item creation.

    Args:
        payload: CatalogItemCreate or a dict of its fields
        session: Object with ``is_admin()``
        service: ProductService to use (defaults to the singleton)

    Returns:
        ActionResult with data {"id": ...} on success, or error
        UNAUTHORIZED / VALIDATION_ERROR / INTERNAL_ERROR
    """
    if not session.is_admin():
        return ActionResult.fail(ErrorKind.UNAUTHORIZED)

    try:
        data = (
            payload if isinstance(payload, CatalogItemCreate)
            else CatalogItemCreate.model_validate(payload)
        )
    except PydanticValidationError as e:
        logger.warning("create_catalog_item_invalid", errors=e.error_count())
        return ActionResult.fail(ErrorKind.VALIDATION_ERROR, flatten_validation_error(e))

    try:
        product = (service or get_product_service()).create(data)
    except AppError as e:
        return ActionResult.fail(ErrorKind.INTERNAL_ERROR, {"message": e.message})

    return ActionResult.ok({"id": product.id})
