"""
Local cache vs destination consistency check.

Produces coarse, human-readable discrepancies per entity type: record
count mismatches and local keys missing from the destination.
"""

import structlog
from pydantic import ValidationError as PydanticValidationError

from exceptions import LocalCacheError
from integrations.local_cache import LocalCache
from integrations.supabase_backend import SupabaseBackend
from models.admin import ConsistencyResult
from models.product import RECORD_MODELS

logger = structlog.get_logger(__name__)

MAX_MISSING_LISTED = 20


class ConsistencyService:

    def __init__(self, local_cache: LocalCache, destination: SupabaseBackend):
        self.local_cache = local_cache
        self.destination = destination

    def check(self) -> ConsistencyResult:
        inconsistencies: list[str] = []

        for entity, model in RECORD_MODELS.items():
            try:
                local = self.local_cache.records(entity)
            except LocalCacheError as e:
                inconsistencies.append(f"{entity}: {e.message}")
                continue

            try:
                remote = self.destination.fetch_all(entity)
            except Exception as e:
                inconsistencies.append(f"{entity}: could not read destination: {e}")
                continue

            if len(local) != len(remote):
                inconsistencies.append(
                    f"{entity}: local cache has {len(local)} records, destination has {len(remote)}"
                )

            local_keys = self._keys(entity, model, local, "local cache", inconsistencies)
            remote_keys = self._keys(entity, model, remote, "destination", inconsistencies)

            missing = sorted(local_keys - remote_keys)
            for key in missing[:MAX_MISSING_LISTED]:
                inconsistencies.append(
                    f"{entity}: {key} is in the local cache but missing from the destination"
                )
            if len(missing) > MAX_MISSING_LISTED:
                inconsistencies.append(
                    f"{entity}: ...and {len(missing) - MAX_MISSING_LISTED} more missing from the destination"
                )

        result = ConsistencyResult(
            consistent=not inconsistencies,
            inconsistencies=inconsistencies,
        )

        logger.info(
            "consistency_checked",
            consistent=result.consistent,
            issues=len(inconsistencies)
        )
        return result

    def _keys(self, entity, model, records, origin, inconsistencies) -> set[str]:
        keys = set()
        invalid = 0
        for raw in records:
            try:
                keys.add(model.model_validate(raw).key)
            except PydanticValidationError:
                invalid += 1

        if invalid:
            inconsistencies.append(f"{entity}: {invalid} invalid records in the {origin}")
        return keys
