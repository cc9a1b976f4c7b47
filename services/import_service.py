"""
Guarded bulk-import actions.

search_photos, download_and_store_photo and bulk_create_products each
check the admin session, validate their input and always return an
ActionResult: errors from the photo gateway, storage and catalog are
translated into error kinds instead of escaping to the caller.

Bulk creation processes items one at a time, in input order, and never
aborts once started: each item gets exactly one ImportResult.
"""

from typing import Any, Callable, Optional
import structlog
from pydantic import BaseModel, ValidationError as PydanticValidationError

from exceptions import ExternalServiceError, RateLimitedError, StorageError
from models.base import ActionResult, ErrorKind, flatten_validation_error
from models.import_wizard import (
    BulkCreateItem,
    BulkCreateRequest,
    ImportResult,
    PhotoDownloadRequest,
    PhotoSearchRequest,
)
from models.product import DonationType
from services.photo_service import PhotoService, get_photo_service
from services.product_service import create_catalog_item

logger = structlog.get_logger(__name__)


MSG_PHOTO_FAILED = "Erro ao enviar foto"
MSG_CREATE_FAILED = "Erro ao criar produto"
MSG_ITEM_FAILED = "Erro ao processar item"

ResultCallback = Callable[[int, ImportResult], None]


def _validate(model: type[BaseModel], payload: Any):
    if isinstance(payload, model):
        return payload
    return model.model_validate(payload)


class ImportService:
    """
    Bulk import actions.

    Args:
        photo_service: Photo gateway (defaults to the singleton)
        create_item: Catalog creation action, ``(payload, session) -> ActionResult``
    """

    def __init__(
        self,
        photo_service: Optional[PhotoService] = None,
        create_item: Optional[Callable[[Any, Any], ActionResult]] = None,
    ):
        self._photo_service = photo_service
        self.create_item = create_item or create_catalog_item

    @property
    def photo_service(self) -> PhotoService:
        if self._photo_service is None:
            self._photo_service = get_photo_service()
        return self._photo_service

    # ===================
    # PHOTO SEARCH
    # ===================

    def search_photos(self, payload: Any, session) -> ActionResult:
        """
        Search candidate photos.

        Returns:
            data {"photos": [PhotoOption, ...]} on success; errors
            UNAUTHORIZED, VALIDATION_ERROR, RATE_LIMITED, EXTERNAL_API_ERROR
        """
        if not session.is_admin():
            return ActionResult.fail(ErrorKind.UNAUTHORIZED)

        try:
            request = _validate(PhotoSearchRequest, payload)
        except PydanticValidationError as e:
            return ActionResult.fail(ErrorKind.VALIDATION_ERROR, flatten_validation_error(e))

        try:
            photos = self.photo_service.search(request)
        except RateLimitedError as e:
            return ActionResult.fail(
                ErrorKind.RATE_LIMITED,
                {"message": e.message, "statusCode": 429}
            )
        except ExternalServiceError as e:
            return ActionResult.fail(
                ErrorKind.EXTERNAL_API_ERROR,
                {"message": e.message, **_status_details(e)}
            )
        except Exception as e:
            logger.error("search_photos_unexpected_error", error=str(e), error_type=type(e).__name__)
            return ActionResult.fail(ErrorKind.EXTERNAL_API_ERROR, {"message": "Erro ao buscar fotos"})

        return ActionResult.ok({"photos": photos})

    # ===================
    # PHOTO DOWNLOAD
    # ===================

    def download_and_store_photo(self, payload: Any, session) -> ActionResult:
        """
        Copy a Pexels photo into the photo bucket.

        URLs outside images.pexels.com are rejected before any request.

        Returns:
            data {"image_path": str} on success; errors UNAUTHORIZED,
            VALIDATION_ERROR, EXTERNAL_API_ERROR (download), STORAGE_ERROR
        """
        if not session.is_admin():
            return ActionResult.fail(ErrorKind.UNAUTHORIZED)

        try:
            request = _validate(PhotoDownloadRequest, payload)
        except PydanticValidationError as e:
            return ActionResult.fail(ErrorKind.VALIDATION_ERROR, flatten_validation_error(e))

        try:
            image_path = self.photo_service.download_and_store(request)
        except StorageError:
            return ActionResult.fail(
                ErrorKind.STORAGE_ERROR,
                {"message": "Erro ao enviar foto para armazenamento"}
            )
        except ExternalServiceError as e:
            return ActionResult.fail(
                ErrorKind.EXTERNAL_API_ERROR,
                {"message": e.message, **_status_details(e)}
            )
        except Exception as e:
            logger.error("download_photo_unexpected_error", error=str(e), error_type=type(e).__name__)
            return ActionResult.fail(ErrorKind.EXTERNAL_API_ERROR, {"message": "Erro ao processar foto"})

        return ActionResult.ok({"image_path": image_path})

    # ===================
    # BULK CREATION
    # ===================

    def bulk_create_products(
        self,
        payload: Any,
        session,
        on_result: Optional[ResultCallback] = None,
    ) -> ActionResult:
        """
        Create catalog items from finalized wizard items, sequentially.

        Per item: store the photo, then create the record with the stored
        image path. A photo failure skips creation for that item. No item
        failure stops the batch.

        Args:
            payload: BulkCreateRequest or dict with "items"
            session: Object with ``is_admin()``
            on_result: Called with (position, result) after each item

        Returns:
            data {"results": [ImportResult, ...]} (one per item, input
            order) or a whole-batch UNAUTHORIZED / VALIDATION_ERROR
        """
        if not session.is_admin():
            return ActionResult.fail(ErrorKind.UNAUTHORIZED)

        try:
            request = _validate(BulkCreateRequest, payload)
        except PydanticValidationError as e:
            logger.warning("bulk_create_invalid", errors=e.error_count())
            return ActionResult.fail(ErrorKind.VALIDATION_ERROR, flatten_validation_error(e))

        total = len(request.items)
        logger.info("bulk_create_started", items=total)

        results: list[ImportResult] = []
        for position, item in enumerate(request.items):
            row_index = item.row_index if item.row_index is not None else position
            try:
                result = self._create_one(item, row_index, session)
            except Exception as e:
                logger.error(
                    "bulk_create_item_error",
                    item=position + 1,
                    total=total,
                    error=str(e),
                    error_type=type(e).__name__
                )
                result = ImportResult(
                    row_index=row_index, name=item.name, success=False, error=MSG_ITEM_FAILED
                )

            if result.success:
                logger.info("bulk_create_item_created", item=position + 1, total=total, product_id=result.product_id)
            else:
                logger.info("bulk_create_item_failed", item=position + 1, total=total, error=result.error)

            results.append(result)
            if on_result is not None:
                try:
                    on_result(position, result)
                except Exception as e:
                    # Progress reporting never stops the batch
                    logger.error(
                        "bulk_create_progress_callback_failed",
                        item=position + 1,
                        error=str(e),
                        error_type=type(e).__name__
                    )

        logger.info(
            "bulk_create_completed",
            created=sum(1 for r in results if r.success),
            total=total
        )

        return ActionResult.ok({"results": results})

    def _create_one(self, item: BulkCreateItem, row_index: int, session) -> ImportResult:
        photo = self.download_and_store_photo(
            {"photo_url": item.photo_url, "product_name": item.name},
            session,
        )
        if not photo.success:
            return ImportResult(
                row_index=row_index, name=item.name, success=False, error=MSG_PHOTO_FAILED
            )

        created = self.create_item(
            {
                "name": item.name,
                "description": item.description,
                "donation_type": item.donation_type,
                "target_amount": (
                    item.target_amount if item.donation_type == DonationType.MONETARY else None
                ),
                "category_ids": [item.category_id],
                "image_path": photo.data["image_path"],
                "is_published": item.is_published,
            },
            session,
        )

        if created.success and created.data:
            return ImportResult(
                row_index=row_index, name=item.name, success=True, product_id=created.data["id"]
            )

        return ImportResult(
            row_index=row_index,
            name=item.name,
            success=False,
            error=created.error or MSG_CREATE_FAILED,
        )


def _status_details(error: ExternalServiceError) -> dict:
    status_code = error.details.get("statusCode")
    return {"statusCode": status_code} if status_code is not None else {}


_import_service: Optional[ImportService] = None


def get_import_service() -> ImportService:
    """Get or create ImportService instance."""
    global _import_service
    if _import_service is None:
        _import_service = ImportService()
    return _import_service
