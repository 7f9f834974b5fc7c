"""
multiagent_store.db.repositories.products

Repository for `Product` entities.

Responsibilities:
- Plain CRUD over the `products` table.
- Name substring search for the catalog API.
- Term and price lookups used by the retail agents.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from multiagent_store.db.models import Product

_LIKE_ESCAPE = "\\"

# SQLite INTEGER (and BIGINT elsewhere) is a signed 64-bit value.
_ID_MIN = -(2**63)
_ID_MAX = 2**63 - 1


def like_pattern(term: str) -> str:
    # Caller text is matched literally: LIKE wildcards in it are escaped.
    escaped = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2).replace("%", r"\%").replace("_", r"\_")
    )
    return f"%{escaped}%"


class ProductRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_all(self) -> list[Product]:
        stmt = select(Product).order_by(Product.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def get(self, product_id: int) -> Product | None:
        # Ids the column cannot hold cannot exist.
        if not _ID_MIN <= product_id <= _ID_MAX:
            return None
        return await self._session.get(Product, product_id)

    async def create(
        self,
        *,
        name: str,
        description: str,
        price: Decimal,
        image_url: str,
    ) -> Product:
        product = Product(name=name, description=description, price=price, image_url=image_url)
        self._session.add(product)
        await self._session.flush()
        return product

    async def update(
        self,
        product_id: int,
        *,
        name: str,
        description: str,
        price: Decimal,
        image_url: str,
    ) -> Product | None:
        # Field overwrite: every mutable column takes the caller's value.
        product = await self.get(product_id)
        if product is None:
            return None
        product.name = name
        product.description = description
        product.price = price
        product.image_url = image_url
        await self._session.flush()
        return product

    async def delete(self, product_id: int) -> bool:
        if not _ID_MIN <= product_id <= _ID_MAX:
            return False
        result = await self._session.execute(delete(Product).where(Product.id == product_id))
        return result.rowcount == 1

    async def search_by_name(self, term: str) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.name.ilike(like_pattern(term), escape=_LIKE_ESCAPE))
            .order_by(Product.id)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def search_terms(
        self, terms: Iterable[str], *, include_description: bool = False
    ) -> list[Product]:
        """
        Products whose name (optionally description) contains any of `terms`.
        """

        clauses = []
        for term in terms:
            pattern = like_pattern(term)
            clauses.append(Product.name.ilike(pattern, escape=_LIKE_ESCAPE))
            if include_description:
                clauses.append(Product.description.ilike(pattern, escape=_LIKE_ESCAPE))
        if not clauses:
            return []
        stmt = select(Product).where(or_(*clauses)).order_by(Product.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def cheapest(self, *, limit: int, exclude_ids: Iterable[int] = ()) -> list[Product]:
        excluded = list(exclude_ids)
        stmt = select(Product).order_by(Product.price, Product.id).limit(limit)
        if excluded:
            stmt = stmt.where(Product.id.not_in(excluded))
        return list((await self._session.execute(stmt)).scalars().all())


# --- Module Notes -----------------------------------------------------------
# Repositories flush but never commit; the router owns the transaction boundary.
