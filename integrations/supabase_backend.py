"""
Supabase destination store.

Wraps a supabase-py Client. Besides the shared BackendClient operations it
exposes what the reset tools need: the `get_tables` stored procedure,
unconditional row deletes and bucket file listing/removal.
"""

from typing import Any, Optional
import structlog
from supabase import Client

from integrations.base import BackendClient, Record
from models.admin import (
    ConnectionDetails,
    ConnectionStatus,
    StorageDetails,
    StorageStatus,
    CollectionStatus,
)

logger = structlog.get_logger(__name__)

# Postgres undefined_table, PostgREST "table not in schema cache"
MISSING_TABLE_CODES = {"42P01", "PGRST205"}

PAGE_SIZE = 1000

# Storage list() returns at most 100 entries unless asked for more
STORAGE_PAGE_SIZE = 100


def is_missing_table(error: Exception) -> bool:
    """Tell a missing table apart from any other failure."""
    code = getattr(error, "code", None)
    if code in MISSING_TABLE_CODES:
        return True
    message = str(error)
    return any(c in message for c in MISSING_TABLE_CODES)


def _name_of(item: Any) -> Optional[str]:
    """Bucket/file/table entries come back as objects, dicts or plain strings."""
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        return item.get("name") or item.get("table_name")
    return getattr(item, "name", None)


def _id_of(item: Any) -> Optional[str]:
    if isinstance(item, dict):
        return item.get("id")
    return getattr(item, "id", None)


class SupabaseBackend(BackendClient):
    """Destination store: Postgres tables plus Supabase Storage."""

    name = "supabase"

    def __init__(
        self,
        client: Client,
        probe_table: str = "products",
        reset_sentinel_id: str = "00000000-0000-0000-0000-000000000000",
    ):
        self.client = client
        self.probe_table = probe_table
        self.reset_sentinel_id = reset_sentinel_id

    # ===================
    # PROBES
    # ===================

    def check_connection(self) -> ConnectionStatus:
        try:
            self.client.table(self.probe_table).select("id").limit(1).execute()

            logger.debug("supabase_probe_ok", table=self.probe_table)

            return ConnectionStatus(
                connected=True,
                details=ConnectionDetails(
                    backend=self.name,
                    probe_target=self.probe_table,
                )
            )

        except Exception as e:
            logger.error(
                "supabase_probe_failed",
                table=self.probe_table,
                error=str(e),
                error_type=type(e).__name__
            )
            return ConnectionStatus(
                connected=False,
                details=ConnectionDetails(
                    backend=self.name,
                    probe_target=self.probe_table,
                    error=str(e),
                )
            )

    def check_storage(self) -> StorageStatus:
        try:
            buckets = self.client.storage.list_buckets() or []
            return StorageStatus(
                available=True,
                details=StorageDetails(bucket_count=len(buckets))
            )
        except Exception as e:
            logger.error("supabase_storage_probe_failed", error=str(e))
            return StorageStatus(
                available=False,
                details=StorageDetails(error=str(e))
            )

    def collection_status(self, collection: str) -> CollectionStatus:
        try:
            self.client.table(collection).select("id").limit(1).execute()
            result = (
                self.client.table(collection)
                .select("id", count="exact")
                .execute()
            )
            count = result.count if result.count is not None else len(result.data or [])
            return CollectionStatus.found(count)

        except Exception as e:
            if is_missing_table(e):
                logger.info("table_not_found", table=collection)
                return CollectionStatus.not_found()

            logger.error("table_inspection_failed", table=collection, error=str(e))
            return CollectionStatus.failed(str(e))

    # ===================
    # RECORDS
    # ===================

    def fetch_all(self, collection: str) -> list[dict]:
        rows: list[dict] = []
        offset = 0

        while True:
            result = (
                self.client.table(collection)
                .select("*")
                .range(offset, offset + PAGE_SIZE - 1)
                .execute()
            )
            page = result.data or []
            rows.extend(page)

            if len(page) < PAGE_SIZE:
                break
            offset += PAGE_SIZE

        logger.debug("table_fetched", table=collection, rows=len(rows))
        return rows

    def fetch_page(self, collection: str, limit: int) -> list[dict]:
        result = self.client.table(collection).select("*").limit(limit).execute()
        return result.data or []

    def insert(self, collection: str, record: Record) -> dict:
        result = self.client.table(collection).insert(record.to_row()).execute()
        return result.data[0] if result.data else record.to_row()

    # ===================
    # RESET SUPPORT
    # ===================

    def list_tables(self) -> list[str]:
        """Public tables, via the `get_tables` stored procedure."""
        result = self.client.rpc("get_tables").execute()
        names = [_name_of(item) for item in (result.data or [])]
        return [name for name in names if name]

    def delete_all_rows(self, table: str) -> None:
        """Delete every row (the sentinel id matches nothing)."""
        (
            self.client.table(table)
            .delete()
            .neq("id", self.reset_sentinel_id)
            .execute()
        )

    def list_buckets(self) -> list[str]:
        buckets = self.client.storage.list_buckets() or []
        names = [_name_of(bucket) for bucket in buckets]
        return [name for name in names if name]

    def list_files(self, bucket: str, prefix: str = "") -> list[str]:
        """
        Every file path in a bucket, walking folders and pages.

        Folder placeholders (entries without an id) are descended into,
        never returned.
        """
        store = self.client.storage.from_(bucket)
        paths: list[str] = []
        offset = 0

        while True:
            page = store.list(
                prefix or None,
                {"limit": STORAGE_PAGE_SIZE, "offset": offset}
            ) or []

            for item in page:
                name = _name_of(item)
                if not name:
                    continue
                path = f"{prefix}/{name}" if prefix else name
                if _id_of(item) is None:
                    paths.extend(self.list_files(bucket, path))
                else:
                    paths.append(path)

            if len(page) < STORAGE_PAGE_SIZE:
                break
            offset += STORAGE_PAGE_SIZE

        return paths

    def remove_files(self, bucket: str, paths: list[str]) -> None:
        self.client.storage.from_(bucket).remove(paths)
