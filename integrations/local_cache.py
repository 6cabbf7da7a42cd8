"""
Local cache reader.

The client-side key-value cache is exported as a JSON object. Values are
either lists of records or, as browser storage keeps them, JSON strings
holding such lists.
"""

import json
from pathlib import Path
from typing import Any, Union
import structlog

from exceptions import LocalCacheError
from models.admin import PRODUCTS, DELIVERIES

logger = structlog.get_logger(__name__)


class LocalCache:
    """Read-only view of the local cache export."""

    def __init__(
        self,
        path: Union[str, Path],
        products_key: str = PRODUCTS,
        deliveries_key: str = DELIVERIES,
    ):
        self.path = Path(path)
        self.keys = {
            PRODUCTS: products_key,
            DELIVERIES: deliveries_key,
        }

    def load(self) -> dict[str, Any]:
        """
        Read the whole cache.

        A missing file is an empty cache.

        Raises:
            LocalCacheError: If the file is not a JSON object
        """
        if not self.path.exists():
            logger.info("local_cache_missing", path=str(self.path))
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("local_cache_read_failed", path=str(self.path), error=str(e))
            raise LocalCacheError(str(self.path), str(e)) from e

        if not isinstance(data, dict):
            raise LocalCacheError(str(self.path), "expected a JSON object at the top level")

        return data

    def records(self, entity: str) -> list[dict]:
        """
        Records stored for an entity type (products, deliveries).

        Raises:
            LocalCacheError: If the stored value is not a list of objects
        """
        key = self.keys.get(entity, entity)
        value = self.load().get(key)

        if value is None:
            return []

        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError as e:
                raise LocalCacheError(str(self.path), f"key '{key}' is not valid JSON: {e}") from e

        if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
            raise LocalCacheError(str(self.path), f"key '{key}' must hold a list of records")

        return value
