"""
Photo resolution gateway.

Searches Pexels for candidate photos and copies a chosen photo into the
catalog's storage bucket. Failures are raised as typed AppErrors:
RateLimitedError for HTTP 429, ExternalServiceError for other upstream
problems and StorageError when the upload fails after a good download.
"""

from typing import Optional
import requests
import structlog

from config import settings
from exceptions import ExternalServiceError, RateLimitedError
from models.import_wizard import PhotoDownloadRequest, PhotoOption, PhotoSearchRequest
from services.storage_service import StorageService, get_storage_service
from utils.format_utils import generate_storage_path

logger = structlog.get_logger(__name__)


SERVICE_NAME = "pexels"
DOWNLOAD_TIMEOUT_SECONDS = 30
DEFAULT_CONTENT_TYPE = "image/jpeg"


def extension_for_content_type(content_type: Optional[str]) -> str:
    """
    File extension for an image content type.

    png, webp and gif are recognized; everything else is stored as jpeg.
    """
    content_type = (content_type or "").lower()
    if "png" in content_type:
        return "png"
    if "webp" in content_type:
        return "webp"
    if "gif" in content_type:
        return "gif"
    return "jpeg"


def _to_photo_option(photo: dict) -> PhotoOption:
    """Map a Pexels photo payload; missing fields become empty strings."""
    src = photo.get("src") or {}
    return PhotoOption(
        id=photo.get("id") or 0,
        src=src.get("medium") or "",
        src_large=src.get("large") or photo.get("src_large") or "",
        alt=photo.get("alt") or "",
        photographer=photo.get("photographer") or "",
    )


class PhotoService:
    """
    Pexels search and download-then-store.

    Both operations are idempotent and safe to retry.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        storage: Optional[StorageService] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.pexels_api_key
        self._storage = storage
        self.bucket = settings.photo_bucket

    @property
    def storage(self) -> StorageService:
        if self._storage is None:
            self._storage = get_storage_service()
        return self._storage

    # ===================
    # SEARCH
    # ===================

    def search(self, request: PhotoSearchRequest) -> list[PhotoOption]:
        """
        Search photos for a query.

        Args:
            request: Validated query and page size

        Returns:
            Ranked photo options (possibly empty)

        Raises:
            RateLimitedError: Pexels answered 429
            ExternalServiceError: Missing key, timeout, network failure,
                other non-2xx or unreadable body
        """
        if not self.api_key:
            logger.error("pexels_api_key_missing")
            raise ExternalServiceError(
                SERVICE_NAME,
                "Configuração de API não disponível"
            )

        try:
            response = requests.get(
                settings.pexels_api_url,
                params={"query": request.query, "per_page": request.per_page},
                headers={"Authorization": self.api_key},
                timeout=settings.photo_search_timeout_seconds,
            )
        except requests.exceptions.Timeout:
            logger.error(
                "photo_search_timeout",
                query=request.query,
                timeout_seconds=settings.photo_search_timeout_seconds
            )
            raise ExternalServiceError(SERVICE_NAME, "Busca expirou. Tente novamente.")
        except requests.exceptions.RequestException as e:
            logger.error("photo_search_request_failed", query=request.query, error=str(e))
            raise ExternalServiceError(SERVICE_NAME, "Erro ao buscar fotos")

        if response.status_code == 429:
            logger.error("photo_search_rate_limited", query=request.query)
            raise RateLimitedError(
                SERVICE_NAME,
                "Limite de busca excedido. Tente novamente em alguns minutos."
            )

        if not response.ok:
            logger.error(
                "photo_search_failed",
                query=request.query,
                status_code=response.status_code
            )
            raise ExternalServiceError(
                SERVICE_NAME,
                "Erro ao buscar fotos. Tente novamente.",
                details={"statusCode": response.status_code}
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error("photo_search_invalid_body", query=request.query, error=str(e))
            raise ExternalServiceError(SERVICE_NAME, "Erro ao buscar fotos")

        photos = [_to_photo_option(p) for p in (payload.get("photos") or [])]

        logger.info("photo_search_completed", query=request.query, results=len(photos))
        return photos

    # ===================
    # DOWNLOAD AND STORE
    # ===================

    def download_and_store(self, request: PhotoDownloadRequest) -> str:
        """
        Download a Pexels photo and upload it to the photo bucket.

        Args:
            request: Validated photo URL (Pexels host only) and item name

        Returns:
            Storage path of the uploaded image

        Raises:
            ExternalServiceError: Download failed
            StorageError: Upload failed after a successful download
        """
        logger.info(
            "photo_download_started",
            product_name=request.product_name,
            photo_url=request.photo_url
        )

        try:
            response = requests.get(request.photo_url, timeout=DOWNLOAD_TIMEOUT_SECONDS)
        except requests.exceptions.RequestException as e:
            logger.error("photo_download_request_failed", photo_url=request.photo_url, error=str(e))
            raise ExternalServiceError(SERVICE_NAME, "Erro ao baixar foto da Pexels")

        if not response.ok:
            logger.error(
                "photo_download_failed",
                photo_url=request.photo_url,
                status_code=response.status_code
            )
            raise ExternalServiceError(
                SERVICE_NAME,
                "Erro ao baixar foto da Pexels",
                details={"statusCode": response.status_code}
            )

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        extension = extension_for_content_type(content_type)
        image_path = generate_storage_path(self.bucket, extension)

        self.storage.upload(self.bucket, image_path, response.content, content_type)

        logger.info(
            "photo_stored",
            product_name=request.product_name,
            image_path=image_path
        )
        return image_path


_photo_service: Optional[PhotoService] = None


def get_photo_service() -> PhotoService:
    """Get or create PhotoService instance."""
    global _photo_service
    if _photo_service is None:
        _photo_service = PhotoService()
    return _photo_service
