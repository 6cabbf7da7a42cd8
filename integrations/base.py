"""
Backend capability interface.

Every store the admin tools talk to (destination, legacy, retired
placeholder) implements BackendClient. Variants are chosen from
configuration at startup.
"""

from abc import ABC, abstractmethod
from typing import Union

from exceptions import BackendUnavailableError
from models.admin import ConnectionStatus, StorageStatus, CollectionStatus
from models.product import Product, DeliveryItem

Record = Union[Product, DeliveryItem]


class BackendClient(ABC):
    """
    Operations shared by every backend.

    Probes never raise; they report failures in their result.
    Reads and writes raise on failure and the calling orchestrator
    decides how to record it.
    """

    name: str = "backend"

    @abstractmethod
    def check_connection(self) -> ConnectionStatus:
        """One minimal read to test reachability."""

    @abstractmethod
    def check_storage(self) -> StorageStatus:
        """Test that file storage is reachable."""

    @abstractmethod
    def collection_status(self, collection: str) -> CollectionStatus:
        """Existence and record count of a collection/table."""

    @abstractmethod
    def fetch_all(self, collection: str) -> list[dict]:
        """Every record of a collection, as raw dicts."""

    @abstractmethod
    def fetch_page(self, collection: str, limit: int) -> list[dict]:
        """At most `limit` records, read with a capped query."""

    @abstractmethod
    def insert(self, collection: str, record: Record) -> dict:
        """Insert one record and return what the store saved."""

    def bucket_exists(self, bucket_name: str) -> bool:
        raise BackendUnavailableError(
            self.name,
            f"{self.name} does not manage buckets by name"
        )

    def create_bucket(self, bucket_name: str) -> str:
        raise BackendUnavailableError(
            self.name,
            f"{self.name} cannot create buckets"
        )
