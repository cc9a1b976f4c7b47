"""
Object storage service.

Uploads bytes to Supabase Storage with the service-role client.
"""

from typing import Optional
import structlog

from config import get_admin_client
from exceptions import StorageError

logger = structlog.get_logger(__name__)


class StorageService:
    """Thin wrapper over Supabase Storage buckets."""

    def __init__(self, client=None):
        self.client = client if client is not None else get_admin_client()

    def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = True,
    ) -> str:
        """
        Store bytes at bucket/path.

        Args:
            bucket: Storage bucket name
            path: Object path inside the bucket
            content: Raw bytes
            content_type: MIME type recorded with the object
            upsert: Overwrite an existing object at the same path

        Returns:
            The stored path

        Raises:
            StorageError: If the client is missing or the upload fails
        """
        if self.client is None:
            raise StorageError(bucket, path, "Storage client not configured")

        logger.debug(
            "uploading_to_storage",
            bucket=bucket,
            storage_path=path,
            size_bytes=len(content)
        )

        try:
            self.client.storage.from_(bucket).upload(
                path,
                content,
                file_options={
                    "content-type": content_type,
                    "upsert": "true" if upsert else "false",
                }
            )
        except Exception as e:
            logger.error(
                "storage_upload_failed",
                bucket=bucket,
                storage_path=path,
                error=str(e)
            )
            raise StorageError(bucket, path, f"Failed to upload file: {e}") from e

        logger.info("uploaded_to_storage", bucket=bucket, storage_path=path)
        return path


_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """Get or create StorageService instance."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
