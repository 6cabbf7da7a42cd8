"""
Placeholder for the retired legacy store.

Selected when LEGACY_BACKEND=retired (or Firebase cannot be initialised).
Probes report the store as unavailable; reads and writes are refused.
"""

from typing import Optional
import structlog

from exceptions import BackendUnavailableError
from integrations.base import BackendClient, Record
from models.admin import (
    ConnectionDetails,
    ConnectionStatus,
    StorageDetails,
    StorageStatus,
    CollectionStatus,
)

logger = structlog.get_logger(__name__)

RETIRED_MESSAGE = "Firebase has been removed from this application. Use Supabase instead."


class RetiredBackend(BackendClient):
    """Legacy store that is no longer available."""

    name = "firebase"

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason or RETIRED_MESSAGE

    def check_connection(self) -> ConnectionStatus:
        logger.warning("retired_backend_probed")
        return ConnectionStatus(
            connected=False,
            details=ConnectionDetails(
                backend=self.name,
                credentials_present=False,
                error=self.reason,
            )
        )

    def check_storage(self) -> StorageStatus:
        return StorageStatus(
            available=False,
            details=StorageDetails(error=self.reason)
        )

    def collection_status(self, collection: str) -> CollectionStatus:
        return CollectionStatus.not_found()

    def fetch_all(self, collection: str) -> list[dict]:
        raise BackendUnavailableError(self.name, self.reason)

    def fetch_page(self, collection: str, limit: int) -> list[dict]:
        raise BackendUnavailableError(self.name, self.reason)

    def insert(self, collection: str, record: Record) -> dict:
        raise BackendUnavailableError(self.name, self.reason)

    def bucket_exists(self, bucket_name: str) -> bool:
        return False

    def create_bucket(self, bucket_name: str) -> str:
        raise BackendUnavailableError(self.name, self.reason)
