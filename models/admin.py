"""
Result models for the admin operations.

Every operation returns one of these; none is persisted.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import Field

from models.base import BaseSchema


PRODUCTS = "products"
DELIVERIES = "deliveries"
MANAGED_COLLECTIONS = [PRODUCTS, DELIVERIES]


def utc_timestamp() -> str:
    return datetime.utcnow().isoformat() + "Z"


# ===================
# STATUS
# ===================

class ConnectionDetails(BaseSchema):
    """Diagnostics attached to a connection probe."""

    backend: str = Field(..., description="Backend that was probed")
    timestamp: str = Field(default_factory=utc_timestamp)
    credentials_present: bool = Field(True, description="Whether credentials were configured")
    probe_target: Optional[str] = Field(None, description="Table or collection read")
    error: Optional[str] = Field(None, description="Failure message")


class ConnectionStatus(BaseSchema):
    """Result of a connection probe."""

    connected: bool
    details: ConnectionDetails


class StorageDetails(BaseSchema):
    """Diagnostics attached to a storage probe."""

    timestamp: str = Field(default_factory=utc_timestamp)
    bucket_name: Optional[str] = None
    bucket_count: Optional[int] = None
    error: Optional[str] = None


class StorageStatus(BaseSchema):
    """Result of a storage probe."""

    available: bool
    details: StorageDetails


class CollectionState(str, Enum):
    """Inspection outcome."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


class CollectionStatus(BaseSchema):
    """
    Existence and size of a collection/table.

    exists/count keep their original meaning; status tells a missing
    collection apart from a failed inspection.
    """

    exists: bool
    count: int = Field(0, ge=0)
    status: CollectionState
    error: Optional[str] = None

    @classmethod
    def found(cls, count: int) -> "CollectionStatus":
        return cls(exists=True, count=count, status=CollectionState.FOUND)

    @classmethod
    def not_found(cls) -> "CollectionStatus":
        return cls(exists=False, count=0, status=CollectionState.NOT_FOUND)

    @classmethod
    def failed(cls, error: str) -> "CollectionStatus":
        return cls(exists=False, count=0, status=CollectionState.ERROR, error=error)


class BackendStatusReport(BaseSchema):
    """Connection, storage and collection status for one backend."""

    backend: str
    connection: ConnectionStatus
    storage: StorageStatus
    collections: dict[str, CollectionStatus]


class RecordPreview(BaseSchema):
    """Records read from one collection."""

    backend: str
    collection: str
    count: int = Field(..., ge=0, description="Records returned (at most the requested limit)")
    records: list[dict[str, Any]]


# ===================
# SEEDING
# ===================

class SeedEntityResult(BaseSchema):
    """
    Seeding outcome for one entity type.

    count is the number of records now present because of this call
    (inserted records, or the existing count when nothing was seeded).
    """

    success: bool
    count: int = 0
    inserted: int = 0
    failed: int = 0
    seeded: bool = False
    errors: list[str] = Field(default_factory=list)


class SeedResult(BaseSchema):
    products: SeedEntityResult
    deliveries: SeedEntityResult


# ===================
# MIGRATION
# ===================

class MigrationSource(str, Enum):
    """Where migrated records come from."""
    LOCAL_CACHE = "local_cache"
    LEGACY = "legacy"


class MigrationResult(BaseSchema):
    """Aggregate migration outcome."""

    success: bool
    migrated: list[str] = Field(default_factory=list, description="Entity types migrated")
    errors: list[str] = Field(default_factory=list)
    counts: dict[str, int] = Field(default_factory=dict, description="Records inserted per entity type")


class ConsistencyResult(BaseSchema):
    consistent: bool
    inconsistencies: list[str] = Field(default_factory=list)


# ===================
# RESET
# ===================

class TableResetResult(BaseSchema):
    table: str
    success: bool
    error: Optional[str] = None


class BucketResetResult(BaseSchema):
    bucket: str
    success: bool
    files_deleted: Optional[int] = None
    error: Optional[str] = None


class ResetResult(BaseSchema):
    """Outcome of clearing every destination table."""

    success: bool
    message: str
    results: list[TableResetResult] = Field(default_factory=list)


class StorageResetResult(BaseSchema):
    """Outcome of clearing every destination bucket."""

    success: bool
    message: str
    results: list[BucketResetResult] = Field(default_factory=list)


# ===================
# LEGACY BUCKETS
# ===================

class BucketCreationRequest(BaseSchema):
    bucket_name: Optional[str] = Field(
        None,
        max_length=222,
        description="Bucket to create (defaults to the configured bucket)"
    )


class BucketCreationResult(BaseSchema):
    success: bool
    bucket_name: Optional[str] = None
    created: bool = False
    error: Optional[str] = None
