"""
multiagent_store.schemas

Wire models shared by the HTTP layer.

Responsibilities:
- camelCase JSON on the wire, snake_case attributes in Python.
- Product request/response shapes and the catalog search envelope.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel


# Prices are exact in Python and plain JSON numbers on the wire.
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

_CENT = Decimal("0.01")
# Larger floats are left for the max_digits check to reject.
_QUANTIZE_LIMIT = 1e15


class CamelModel(BaseModel):
    # Accept both `productQuery` and `product_query` on input; emit camelCase.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductIn(CamelModel):
    name: str = Field(min_length=1, max_length=256)
    description: str = ""
    price: Price = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    image_url: str = Field(default="", max_length=512)

    @field_validator("price", mode="before")
    @classmethod
    def _cents(cls, v: Any) -> Any:
        # JSON floats such as 0.1 + 0.2 carry binary noise; store whole cents.
        if isinstance(v, float) and math.isfinite(v) and abs(v) < _QUANTIZE_LIMIT:
            return Decimal(repr(v)).quantize(_CENT, rounding=ROUND_HALF_UP)
        return v


class ProductOut(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: Price
    image_url: str


class SearchResponse(CamelModel):
    products: list[ProductOut] = Field(default_factory=list)
    response: str = ""
