"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.product import Product, DeliveryItem, RECORD_MODELS
from models.admin import (
    PRODUCTS,
    DELIVERIES,
    MANAGED_COLLECTIONS,
    ConnectionDetails,
    ConnectionStatus,
    StorageDetails,
    StorageStatus,
    CollectionState,
    CollectionStatus,
    BackendStatusReport,
    RecordPreview,
    SeedEntityResult,
    SeedResult,
    MigrationSource,
    MigrationResult,
    ConsistencyResult,
    TableResetResult,
    BucketResetResult,
    ResetResult,
    StorageResetResult,
    BucketCreationRequest,
    BucketCreationResult,
)

__all__ = [
    "BaseSchema",
    "Product",
    "DeliveryItem",
    "RECORD_MODELS",
    "PRODUCTS",
    "DELIVERIES",
    "MANAGED_COLLECTIONS",
    "ConnectionDetails",
    "ConnectionStatus",
    "StorageDetails",
    "StorageStatus",
    "CollectionState",
    "CollectionStatus",
    "BackendStatusReport",
    "RecordPreview",
    "SeedEntityResult",
    "SeedResult",
    "MigrationSource",
    "MigrationResult",
    "ConsistencyResult",
    "TableResetResult",
    "BucketResetResult",
    "ResetResult",
    "StorageResetResult",
    "BucketCreationRequest",
    "BucketCreationResult",
]
