"""
Legacy storage bucket check/create.
"""

from typing import Optional
import structlog

from integrations.base import BackendClient
from models.admin import BucketCreationResult, StorageStatus

logger = structlog.get_logger(__name__)


class BucketService:
    """Storage bucket management on the legacy store."""

    def __init__(self, legacy: BackendClient, default_bucket_name: Optional[str] = None):
        self.legacy = legacy
        self.default_bucket_name = default_bucket_name

    def check_storage(self) -> StorageStatus:
        return self.legacy.check_storage()

    def create_bucket(self, bucket_name: Optional[str] = None) -> BucketCreationResult:
        """
        Create a bucket unless it already exists.

        Args:
            bucket_name: Explicit name; falls back to the configured default

        Returns:
            BucketCreationResult (created=False when it already existed)
        """
        connection = self.legacy.check_connection()
        if not connection.connected:
            message = (
                "Firebase connection issues: "
                f"{connection.details.error or 'Unknown connection error'}"
            )
            logger.error("bucket_creation_aborted", reason=message)
            return BucketCreationResult(success=False, error=message)

        name = (bucket_name or "").strip() or self.default_bucket_name
        if not name:
            return BucketCreationResult(
                success=False,
                error="No bucket name provided and no default bucket configured",
            )

        try:
            if self.legacy.bucket_exists(name):
                logger.info("bucket_already_exists", bucket=name)
                return BucketCreationResult(success=True, bucket_name=name, created=False)

            created = self.legacy.create_bucket(name)
            logger.info("bucket_created", bucket=created)
            return BucketCreationResult(success=True, bucket_name=created, created=True)

        except Exception as e:
            logger.error("bucket_creation_failed", bucket=name, error=str(e))
            return BucketCreationResult(success=False, bucket_name=name, error=str(e))
