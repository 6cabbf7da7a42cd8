"""
Admin API routes.

One endpoint per admin action: status, initialize, consistency, migrate,
reset tables, reset storage, legacy bucket check/create.

Handlers are plain functions so FastAPI runs them in its threadpool;
overlapping requests reach the in-flight guard concurrently.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
import structlog

from config import Backends, get_settings
from exceptions import AppError, UnknownCollectionError
from models.admin import (
    MANAGED_COLLECTIONS,
    BackendStatusReport,
    BucketCreationRequest,
    BucketCreationResult,
    CollectionStatus,
    ConsistencyResult,
    MigrationResult,
    MigrationSource,
    RecordPreview,
    ResetResult,
    SeedResult,
    StorageResetResult,
    StorageStatus,
)
from services.status_service import StatusService
from services.seed_service import SeedService
from services.consistency_service import ConsistencyService
from services.migration_service import MigrationService
from services.reset_service import ResetService
from services.bucket_service import BucketService
from services.operation_guard import in_flight

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])

BACKEND_PATTERN = "^(destination|legacy)$"


def get_backends(request: Request) -> Backends:
    """Backends built by the application lifespan."""
    return request.app.state.backends


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# STATUS
# ===================

@router.get("/status", response_model=BackendStatusReport)
def get_status(
    backend: str = Query("destination", pattern=BACKEND_PATTERN),
    backends: Backends = Depends(get_backends),
):
    """
    Connection, storage and collection status for one backend.

    "Refresh Status" on the setup screen.
    """
    try:
        service = StatusService(backends.by_name(backend), backend_label=backend)
        return service.report()
    except Exception as e:
        return handle_error(e)


@router.get("/collections/{collection}", response_model=CollectionStatus)
def inspect_collection(
    collection: str,
    backend: str = Query("destination", pattern=BACKEND_PATTERN),
    backends: Backends = Depends(get_backends),
):
    """Existence and record count of any collection/table."""
    try:
        service = StatusService(backends.by_name(backend), backend_label=backend)
        return service.inspect(collection)
    except Exception as e:
        return handle_error(e)


@router.get("/collections/{collection}/records", response_model=RecordPreview)
def preview_records(
    collection: str,
    backend: str = Query("destination", pattern=BACKEND_PATTERN),
    limit: int = Query(20, ge=1, le=200, description="Records returned"),
    backends: Backends = Depends(get_backends),
):
    """
    First records of products or deliveries.

    Raises:
        422: Collection is not managed
        503: Backend cannot be read
    """
    try:
        if collection not in MANAGED_COLLECTIONS:
            raise UnknownCollectionError(collection, MANAGED_COLLECTIONS)

        service = StatusService(backends.by_name(backend), backend_label=backend)
        return service.preview(collection, limit=limit)
    except Exception as e:
        return handle_error(e)


# ===================
# SEEDING
# ===================

@router.post("/initialize", response_model=SeedResult)
def initialize_collections(
    backend: str = Query("destination", pattern=BACKEND_PATTERN),
    backends: Backends = Depends(get_backends),
):
    """
    Seed empty products/deliveries with sample records.

    Raises:
        409: Seeding already running
    """
    try:
        with in_flight(f"initialize:{backend}"):
            service = SeedService(backends.by_name(backend))
            return service.initialize_collections()
    except Exception as e:
        return handle_error(e)


# ===================
# MIGRATION
# ===================

@router.get("/consistency", response_model=ConsistencyResult)
def check_consistency(backends: Backends = Depends(get_backends)):
    """Compare the local cache with the destination."""
    try:
        with in_flight("consistency"):
            service = ConsistencyService(backends.local_cache, backends.destination)
            return service.check()
    except Exception as e:
        return handle_error(e)


@router.post("/migrate", response_model=MigrationResult)
def migrate(
    source: MigrationSource = Query(MigrationSource.LOCAL_CACHE, description="Migration source"),
    backends: Backends = Depends(get_backends),
):
    """
    Copy products and deliveries into the destination.

    Not idempotent: running twice duplicates records.

    Raises:
        409: Migration already running
    """
    try:
        with in_flight("migrate"):
            service = MigrationService(
                backends.destination,
                backends.legacy,
                backends.local_cache,
            )
            return service.migrate(source)
    except Exception as e:
        return handle_error(e)


# ===================
# RESET
# ===================

@router.post("/reset/tables", response_model=ResetResult)
def reset_tables(backends: Backends = Depends(get_backends)):
    """
    Delete every row of every public table.

    Raises:
        409: Reset already running
        503: Service role key not configured
    """
    try:
        with in_flight("reset:tables"):
            service = ResetService(backends.admin)
            result = service.delete_all_table_data()
            logger.info("table_reset_complete", success=result.success, message=result.message)
            return result
    except Exception as e:
        return handle_error(e)


@router.post("/reset/storage", response_model=StorageResetResult)
def reset_storage(backends: Backends = Depends(get_backends)):
    """
    Delete every file of every storage bucket.

    Raises:
        409: Reset already running
        503: Service role key not configured
    """
    try:
        with in_flight("reset:storage"):
            service = ResetService(backends.admin)
            result = service.delete_all_storage_files()
            logger.info("storage_reset_complete", success=result.success, message=result.message)
            return result
    except Exception as e:
        return handle_error(e)


# ===================
# LEGACY STORAGE
# ===================

@router.get("/legacy/storage", response_model=StorageStatus)
def check_legacy_storage(backends: Backends = Depends(get_backends)):
    """Legacy storage bucket availability."""
    try:
        service = BucketService(backends.legacy, get_settings().default_bucket_name)
        return service.check_storage()
    except Exception as e:
        return handle_error(e)


@router.post("/legacy/buckets", response_model=BucketCreationResult)
def create_legacy_bucket(
    data: Optional[BucketCreationRequest] = None,
    backends: Backends = Depends(get_backends),
):
    """
    Create a legacy storage bucket unless it exists.

    Uses the configured bucket when no name is given.
    """
    try:
        with in_flight("legacy:create_bucket"):
            service = BucketService(backends.legacy, get_settings().default_bucket_name)
            return service.create_bucket(data.bucket_name if data else None)
    except Exception as e:
        return handle_error(e)
