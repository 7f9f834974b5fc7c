"""
multiagent_store.agents.catalog

Catalog and store-layout view used by the retail agents.

Responsibilities:
- Turn a free-text shopper query into search terms.
- Serialize catalog reads from concurrently running agents onto one session.
- Map products onto the store layout (aisle + section).
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from decimal import Decimal

from multiagent_store.db.models import Product
from multiagent_store.db.repositories.products import ProductRepo

_WORD = re.compile(r"[a-z0-9]+")

_STOPWORDS = frozenset(
    {
        "a", "an", "and", "any", "are", "can", "do", "does", "find", "for", "from", "get",
        "have", "help", "how", "i", "in", "is", "it", "looking", "me", "my", "need", "of",
        "on", "or", "please", "some", "something", "the", "there", "this", "to", "want",
        "what", "where", "which", "with", "you", "your", "buy", "store", "shop", "would",
        "like", "instead", "alternative", "alternatives", "cheaper", "similar", "aisle",
        "located", "locate", "directions", "navigate",
    }
)

_SECTIONS = "ABCD"


def query_terms(query: str) -> list[str]:
    """
    Lower-cased content words of a query, naive plural stripped, order kept,
    duplicates dropped.
    """

    terms: list[str] = []
    for word in _WORD.findall(query.lower()):
        if len(word) < 3 or word in _STOPWORDS:
            continue
        if len(word) > 4 and word.endswith("es") and word[-3] in "sxz":
            word = word[:-2]
        elif len(word) > 3 and word.endswith("s") and not word.endswith("ss"):
            word = word[:-1]
        if word not in terms:
            terms.append(word)
    return terms


@dataclass(frozen=True, slots=True)
class ProductFact:
    product_id: int
    name: str
    price: Decimal

    @classmethod
    def of(cls, product: Product) -> ProductFact:
        return cls(product_id=product.id, name=product.name, price=Decimal(product.price))

    def as_dict(self) -> dict[str, object]:
        return {"product_id": self.product_id, "name": self.name, "price": str(self.price)}


@dataclass(frozen=True, slots=True)
class Placement:
    aisle: int
    section: str


class StoreLayout:
    def __init__(self, *, aisles: int) -> None:
        if aisles < 1:
            raise ValueError("store must have at least one aisle")
        self.aisles = aisles

    def place(self, product_id: int) -> Placement:
        slot = max(product_id, 1) - 1
        return Placement(
            aisle=1 + slot % self.aisles,
            section=_SECTIONS[(slot // self.aisles) % len(_SECTIONS)],
        )


class CatalogLookup:
    """
    Agent-facing catalog reads. A single request-scoped AsyncSession can't run
    statements concurrently, so every read takes the same lock.
    """

    def __init__(self, repo: ProductRepo) -> None:
        self._repo = repo
        self._lock = asyncio.Lock()

    async def matching(self, query: str) -> list[ProductFact]:
        terms = query_terms(query)
        if not terms:
            return []
        async with self._lock:
            products = await self._repo.search_terms(terms)
        return [ProductFact.of(p) for p in products]

    async def related(self, query: str, *, exclude_ids: set[int]) -> list[ProductFact]:
        # Related: shares a query term in name or description but wasn't a direct match.
        terms = query_terms(query)
        if not terms:
            return []
        async with self._lock:
            products = await self._repo.search_terms(terms, include_description=True)
        return [ProductFact.of(p) for p in products if p.id not in exclude_ids]

    async def cheapest(self, *, limit: int, exclude_ids: set[int]) -> list[ProductFact]:
        async with self._lock:
            products = await self._repo.cheapest(limit=limit, exclude_ids=exclude_ids)
        return [ProductFact.of(p) for p in products]
