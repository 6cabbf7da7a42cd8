"""
Admin orchestration services.

Each service runs one family of admin operations against explicitly
passed backend clients.
"""

from services.status_service import StatusService
from services.seed_service import SeedService, DEFAULT_PRODUCTS, default_deliveries
from services.consistency_service import ConsistencyService
from services.migration_service import MigrationService
from services.reset_service import ResetService, is_protected_table
from services.bucket_service import BucketService

__all__ = [
    "StatusService",
    "SeedService",
    "DEFAULT_PRODUCTS",
    "default_deliveries",
    "ConsistencyService",
    "MigrationService",
    "ResetService",
    "is_protected_table",
    "BucketService",
]
