"""
Migration into the destination store.

Copies products and deliveries from the local cache or the legacy store
into Supabase, one record at a time.

No transaction wraps the run: records inserted before a failure stay, and
re-running inserts everything again.
"""

from typing import Callable
import structlog

from integrations.base import BackendClient
from integrations.local_cache import LocalCache
from integrations.supabase_backend import SupabaseBackend
from models.admin import MigrationResult, MigrationSource
from models.product import RECORD_MODELS
from services.consistency_service import ConsistencyService

logger = structlog.get_logger(__name__)


def _record_label(raw: dict) -> str:
    return str(raw.get("id") or raw.get("sku") or "?")


class MigrationService:
    """Sequential source → destination copy."""

    def __init__(
        self,
        destination: SupabaseBackend,
        legacy: BackendClient,
        local_cache: LocalCache,
    ):
        self.destination = destination
        self.legacy = legacy
        self.local_cache = local_cache

    def migrate(self, source: MigrationSource) -> MigrationResult:
        """
        Run one migration.

        Steps:
            1. Probe the destination; abort if unreachable
            2. Probe the legacy store (legacy source) or run the
               consistency check and only log mismatches (local source)
            3. Read every source record per entity type
            4. Insert each into the destination
            5. Aggregate outcomes

        Returns:
            MigrationResult; never raises for backend failures
        """
        logger.info("migration_started", source=source.value)

        connection = self.destination.check_connection()
        if not connection.connected:
            message = (
                "Supabase connection issues: "
                f"{connection.details.error or 'Unknown connection error'}"
            )
            logger.error("migration_aborted", source=source.value, reason=message)
            return MigrationResult(success=False, errors=[message])

        if source == MigrationSource.LEGACY:
            legacy_connection = self.legacy.check_connection()
            if not legacy_connection.connected:
                message = (
                    "Firebase connection issues: "
                    f"{legacy_connection.details.error or 'Unknown connection error'}"
                )
                logger.error("migration_aborted", source=source.value, reason=message)
                return MigrationResult(success=False, errors=[message])
            read: Callable[[str], list[dict]] = self.legacy.fetch_all
        else:
            consistency = ConsistencyService(self.local_cache, self.destination).check()
            if not consistency.consistent:
                # Migration proceeds regardless
                logger.warning(
                    "data_consistency_issues",
                    inconsistencies=consistency.inconsistencies
                )
            read = self.local_cache.records

        migrated: list[str] = []
        errors: list[str] = []
        counts: dict[str, int] = {}

        for entity, model in RECORD_MODELS.items():
            try:
                raw_records = read(entity)
            except Exception as e:
                logger.error("migration_read_failed", entity=entity, error=str(e))
                errors.append(f"{entity}: failed to read source: {e}")
                continue

            inserted = 0
            for raw in raw_records:
                try:
                    record = model.model_validate(raw)
                    self.destination.insert(entity, record)
                    inserted += 1
                except Exception as e:
                    logger.warning(
                        "migration_record_failed",
                        entity=entity,
                        record=_record_label(raw),
                        error=str(e)
                    )
                    errors.append(f"{entity} {_record_label(raw)}: {e}")

            counts[entity] = inserted
            if inserted:
                migrated.append(entity)

            logger.info(
                "entity_migrated",
                entity=entity,
                inserted=inserted,
                total=len(raw_records)
            )

        result = MigrationResult(
            success=not errors,
            migrated=migrated,
            errors=errors,
            counts=counts,
        )

        logger.info(
            "migration_complete",
            source=source.value,
            success=result.success,
            migrated=migrated,
            errors=len(errors)
        )
        return result
