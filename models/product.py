"""
Product and delivery records.

Records arrive from three places: the local cache (camelCase JSON), the
legacy document store (camelCase documents) and the destination tables
(snake_case rows). Both spellings validate; rows are written snake_case and
documents camelCase.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from pydantic import Field, field_validator

from models.base import BaseSchema
from models.admin import PRODUCTS, DELIVERIES


def _join_delimited(value: Any) -> Any:
    """Lists become comma-delimited strings."""
    if isinstance(value, (list, tuple)):
        return ",".join(str(item).strip() for item in value if str(item).strip())
    return value


class Product(BaseSchema):
    """
    Warehouse product.

    sizes and colors are comma-delimited lists.
    """

    id: Optional[str] = Field(None, description="Source identifier")
    sku: str = Field(..., min_length=1, max_length=100, description="Product SKU")
    name: Optional[str] = Field(None, max_length=200, description="Display name")
    category: Optional[str] = Field(None, max_length=100, description="Product category")
    pairs_per_box: Optional[int] = Field(
        None,
        ge=0,
        alias="pairsPerBox",
        description="Pairs packed per box"
    )
    sizes: Optional[str] = Field(None, description="Comma-delimited sizes")
    colors: Optional[str] = Field(None, description="Comma-delimited colors")

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> Any:
        """Numeric source ids become strings."""
        if v is None:
            return v
        return str(v)

    @field_validator("sizes", "colors", mode="before")
    @classmethod
    def delimited(cls, v: Any) -> Any:
        return _join_delimited(v)

    def to_row(self) -> dict:
        """Destination row (snake_case, destination assigns the id)."""
        return self.model_dump(mode="json", exclude={"id"}, exclude_none=True)

    def to_document(self) -> dict:
        """Legacy document (camelCase)."""
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)

    @property
    def key(self) -> str:
        """Comparison key across stores."""
        return self.sku


class DeliveryItem(BaseSchema):
    """
    Delivery of boxes for one SKU.

    total_pairs is computed by the caller (box_count x pairs_per_box);
    it is stored as given and never re-validated.
    """

    id: Optional[str] = Field(None, description="Source identifier")
    date: datetime = Field(..., description="Delivery timestamp")
    sku: str = Field(..., min_length=1, max_length=100, description="Delivered SKU")
    box_count: int = Field(..., ge=0, alias="boxCount", description="Boxes delivered")
    pairs_per_box: Optional[int] = Field(
        None,
        ge=0,
        alias="pairsPerBox",
        description="Pairs per box"
    )
    total_pairs: Optional[int] = Field(
        None,
        ge=0,
        alias="totalPairs",
        description="Pairs delivered"
    )

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> Any:
        if v is None:
            return v
        return str(v)

    @field_validator("date")
    @classmethod
    def date_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    def to_row(self) -> dict:
        return self.model_dump(mode="json", exclude={"id"}, exclude_none=True)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)

    @property
    def key(self) -> str:
        return f"{self.sku}@{self.date.isoformat()}"


RECORD_MODELS = {
    PRODUCTS: Product,
    DELIVERIES: DeliveryItem,
}
