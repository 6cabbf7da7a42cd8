"""
Backend status service.

Connection probe, storage probe, collection inspection and record preview
for a single backend ("Refresh Status" on the setup screen).
"""

import structlog

from integrations.base import BackendClient
from models.admin import (
    MANAGED_COLLECTIONS,
    BackendStatusReport,
    CollectionStatus,
    ConnectionStatus,
    RecordPreview,
    StorageStatus,
)

logger = structlog.get_logger(__name__)


class StatusService:
    """Read-only checks against one backend."""

    def __init__(self, backend: BackendClient, backend_label: str = "destination"):
        self.backend = backend
        self.backend_label = backend_label

    def check_connection(self) -> ConnectionStatus:
        status = self.backend.check_connection()
        logger.info(
            "connection_checked",
            backend=self.backend_label,
            connected=status.connected
        )
        return status

    def check_storage(self) -> StorageStatus:
        return self.backend.check_storage()

    def inspect(self, collection: str) -> CollectionStatus:
        """
        Check that a collection/table exists and count its records.

        Args:
            collection: Collection or table name

        Returns:
            CollectionStatus (never raises)
        """
        status = self.backend.collection_status(collection)
        logger.debug(
            "collection_inspected",
            backend=self.backend_label,
            collection=collection,
            status=status.status.value,
            count=status.count
        )
        return status

    def report(self) -> BackendStatusReport:
        """Connection, storage and managed-collection status in one pass."""
        connection = self.check_connection()
        storage = self.check_storage()
        collections = {name: self.inspect(name) for name in MANAGED_COLLECTIONS}

        return BackendStatusReport(
            backend=self.backend_label,
            connection=connection,
            storage=storage,
            collections=collections,
        )

    def preview(self, collection: str, limit: int = 20) -> RecordPreview:
        """
        First `limit` records of a collection.

        Raises:
            Whatever the backend raises on read failure
        """
        records = self.backend.fetch_page(collection, limit)
        return RecordPreview(
            backend=self.backend_label,
            collection=collection,
            count=len(records),
            records=records,
        )
