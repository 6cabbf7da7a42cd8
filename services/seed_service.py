"""
Default-data seeding.

Fills empty products/deliveries collections with a small fixed sample so a
fresh backend has something to show.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import structlog

from integrations.base import BackendClient, Record
from models.admin import (
    PRODUCTS,
    DELIVERIES,
    CollectionState,
    SeedEntityResult,
    SeedResult,
)
from models.product import Product, DeliveryItem

logger = structlog.get_logger(__name__)


DEFAULT_PRODUCTS = [
    Product(
        sku="SKU-123-BLK",
        name="Men's Casual Shoes",
        category="men_shoes",
        pairs_per_box=12,
        sizes="40,41,42,43,44",
        colors="Black",
    ),
    Product(
        sku="SKU-456-RED",
        name="Women's Heels",
        category="women_shoes",
        pairs_per_box=10,
        sizes="36,37,38,39,40",
        colors="Red",
    ),
    Product(
        sku="SKU-789-BRN",
        name="Men's Sandals",
        category="men_sandals",
        pairs_per_box=12,
        sizes="40,41,42,43,44,45",
        colors="Brown",
    ),
    Product(
        sku="SKU-321-WHT",
        name="Women's Sneakers",
        category="women_shoes",
        pairs_per_box=10,
        sizes="36,37,38,39,40,41",
        colors="White,Pink",
    ),
    Product(
        sku="SKU-654-BLU",
        name="Kids' Sports Shoes",
        category="kids_shoes",
        pairs_per_box=16,
        sizes="28,29,30,31,32,33",
        colors="Blue,Green",
    ),
]

# (sku, days ago, boxes)
DEFAULT_DELIVERY_PLAN = [
    ("SKU-123-BLK", 1, 5),
    ("SKU-456-RED", 2, 10),
    ("SKU-789-BRN", 3, 15),
]


def default_deliveries(now: Optional[datetime] = None) -> list[DeliveryItem]:
    """Sample deliveries dated relative to `now`."""
    now = now or datetime.now(timezone.utc)
    pairs_per_box = {p.sku: p.pairs_per_box for p in DEFAULT_PRODUCTS}

    deliveries = []
    for sku, days_ago, boxes in DEFAULT_DELIVERY_PLAN:
        per_box = pairs_per_box[sku]
        deliveries.append(
            DeliveryItem(
                date=now - timedelta(days=days_ago),
                sku=sku,
                box_count=boxes,
                pairs_per_box=per_box,
                total_pairs=boxes * per_box,
            )
        )
    return deliveries


class SeedService:
    """
    Seeds products and deliveries into one backend.

    Collections that already hold records are left untouched.
    """

    def __init__(self, backend: BackendClient):
        self.backend = backend

    def initialize_collections(self) -> SeedResult:
        logger.info("seeding_started", backend=self.backend.name)

        products = self.seed(PRODUCTS, DEFAULT_PRODUCTS)
        deliveries = self.seed(DELIVERIES, default_deliveries())

        logger.info(
            "seeding_complete",
            backend=self.backend.name,
            products=products.count,
            deliveries=deliveries.count
        )

        return SeedResult(products=products, deliveries=deliveries)

    def seed(self, collection: str, records: list[Record]) -> SeedEntityResult:
        """
        Insert `records` one at a time if the collection is empty.

        Per-record failures are counted and the loop continues; success
        is true only when every record was inserted.
        """
        status = self.backend.collection_status(collection)

        if status.status == CollectionState.ERROR:
            logger.error("seed_inspection_failed", collection=collection, error=status.error)
            return SeedEntityResult(
                success=False,
                errors=[f"{collection}: {status.error}"],
            )

        if status.count > 0:
            logger.info("seed_skipped_existing", collection=collection, count=status.count)
            return SeedEntityResult(success=True, count=status.count, seeded=False)

        inserted = 0
        errors = []
        for record in records:
            try:
                self.backend.insert(collection, record)
                inserted += 1
            except Exception as e:
                logger.warning(
                    "seed_record_failed",
                    collection=collection,
                    sku=record.sku,
                    error=str(e)
                )
                errors.append(f"{collection} {record.sku}: {e}")

        return SeedEntityResult(
            success=not errors,
            count=inserted,
            inserted=inserted,
            failed=len(errors),
            seeded=True,
            errors=errors,
        )
