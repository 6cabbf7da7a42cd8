"""
Destination reset.

Deletes every row of every public table and every file of every storage
bucket. Best effort: a failure on one table or bucket is recorded and the
next one is still processed.

Requires the service role (admin) client.
"""

from typing import Optional
import structlog

from exceptions import AdminClientUnavailableError
from integrations.supabase_backend import SupabaseBackend
from models.admin import (
    BucketResetResult,
    ResetResult,
    StorageResetResult,
    TableResetResult,
)

logger = structlog.get_logger(__name__)

SKIPPED_TABLES = {"schema_migrations", "spatial_ref_sys"}


def is_protected_table(table: str) -> bool:
    """System and migration tables are never cleared."""
    return table.startswith("_") or table in SKIPPED_TABLES


class ResetService:
    """Clears destination tables and storage."""

    def __init__(self, admin: Optional[SupabaseBackend]):
        if admin is None:
            raise AdminClientUnavailableError()
        self.admin = admin

    def _connection_error(self) -> Optional[str]:
        status = self.admin.check_connection()
        if status.connected:
            return None
        return (
            "Supabase connection issues: "
            f"{status.details.error or 'Unknown connection error'}"
        )

    def delete_all_table_data(self) -> ResetResult:
        """
        Delete all rows from every table returned by `get_tables`.

        Exactly one delete is issued per non-protected table.
        """
        connection_error = self._connection_error()
        if connection_error:
            logger.error("table_reset_aborted", reason=connection_error)
            return ResetResult(
                success=False,
                message=connection_error,
                results=[TableResetResult(table="connection", success=False, error=connection_error)],
            )

        try:
            tables = self.admin.list_tables()
        except Exception as e:
            logger.error("list_tables_failed", error=str(e))
            return ResetResult(success=False, message=f"Failed to get tables: {e}")

        if not tables:
            return ResetResult(success=True, message="No tables found to clear")

        results = []
        for table in tables:
            if is_protected_table(table):
                logger.debug("table_reset_skipped", table=table)
                continue

            try:
                self.admin.delete_all_rows(table)
                results.append(TableResetResult(table=table, success=True))
                logger.info("table_cleared", table=table)
            except Exception as e:
                logger.error("table_reset_failed", table=table, error=str(e))
                results.append(TableResetResult(table=table, success=False, error=str(e)))

        cleared = sum(1 for r in results if r.success)
        return ResetResult(
            success=True,
            message=f"Cleared data from {cleared} tables",
            results=results,
        )

    def delete_all_storage_files(self) -> StorageResetResult:
        """
        Remove every listed file from every bucket.

        Files are removed with one bulk call per bucket.
        """
        connection_error = self._connection_error()
        if connection_error:
            logger.error("storage_reset_aborted", reason=connection_error)
            return StorageResetResult(
                success=False,
                message=connection_error,
                results=[BucketResetResult(bucket="connection", success=False, error=connection_error)],
            )

        try:
            buckets = self.admin.list_buckets()
        except Exception as e:
            logger.error("list_buckets_failed", error=str(e))
            return StorageResetResult(success=False, message=f"Failed to list buckets: {e}")

        if not buckets:
            return StorageResetResult(success=True, message="No storage buckets found")

        results = []
        for bucket in buckets:
            try:
                files = self.admin.list_files(bucket)
            except Exception as e:
                logger.error("bucket_list_failed", bucket=bucket, error=str(e))
                results.append(BucketResetResult(bucket=bucket, success=False, error=str(e)))
                continue

            if not files:
                results.append(BucketResetResult(bucket=bucket, success=True, files_deleted=0))
                continue

            try:
                self.admin.remove_files(bucket, files)
                results.append(
                    BucketResetResult(bucket=bucket, success=True, files_deleted=len(files))
                )
                logger.info("bucket_cleared", bucket=bucket, files=len(files))
            except Exception as e:
                logger.error("bucket_reset_failed", bucket=bucket, error=str(e))
                results.append(BucketResetResult(bucket=bucket, success=False, error=str(e)))

        return StorageResetResult(
            success=True,
            message=f"Processed {len(results)} storage buckets",
            results=results,
        )
