"""
multiagent_store.api.routers.products

Catalog CRUD endpoints.

Responsibilities:
- List, fetch, create, overwrite-update and delete products.
- Name substring search with a human-readable summary.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import (
    HTTP_201_CREATED,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from multiagent_store.api.deps import db_session
from multiagent_store.db.repositories.products import ProductRepo
from multiagent_store.observability.logging import get_logger
from multiagent_store.schemas import ProductIn, ProductOut, SearchResponse

log = get_logger(__name__)

router = APIRouter(prefix="/api/product", tags=["products"])

_NOT_FOUND = "Product not found"
_STORE_FAILURE = "An error occurred while accessing the product catalog."


def _store_failure(e: SQLAlchemyError, *, op: str) -> HTTPException:
    log.error("catalog_store_failed", op=op, exc_info=e)
    return HTTPException(status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail=_STORE_FAILURE)


@router.get("", response_model=list[ProductOut])
async def list_products(session: AsyncSession = Depends(db_session)) -> list[ProductOut]:
    try:
        products = await ProductRepo(session).list_all()
    except SQLAlchemyError as e:
        raise _store_failure(e, op="list") from e
    return [ProductOut.model_validate(p) for p in products]


@router.get("/search", response_model=SearchResponse)
async def search_products(
    search: str = Query(min_length=1, max_length=256),
    session: AsyncSession = Depends(db_session),
) -> SearchResponse:
    try:
        products = await ProductRepo(session).search_by_name(search)
    except SQLAlchemyError as e:
        raise _store_failure(e, op="search") from e

    if products:
        summary = f"{len(products)} Products found for [{search}]"
    else:
        summary = f"No products found for [{search}]"
    return SearchResponse(
        products=[ProductOut.model_validate(p) for p in products],
        response=summary,
    )


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(
    product_id: int,
    session: AsyncSession = Depends(db_session),
) -> ProductOut:
    try:
        product = await ProductRepo(session).get(product_id)
    except SQLAlchemyError as e:
        raise _store_failure(e, op="get") from e
    if product is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return ProductOut.model_validate(product)


@router.post("", response_model=ProductOut, status_code=HTTP_201_CREATED)
async def create_product(
    body: ProductIn,
    response: Response,
    session: AsyncSession = Depends(db_session),
) -> ProductOut:
    try:
        product = await ProductRepo(session).create(
            name=body.name,
            description=body.description,
            price=body.price,
            image_url=body.image_url,
        )
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise _store_failure(e, op="create") from e

    log.info("product_created", product_id=product.id)
    response.headers["Location"] = f"/api/product/{product.id}"
    return ProductOut.model_validate(product)


@router.put("/{product_id}", response_model=ProductOut)
async def update_product(
    product_id: int,
    body: ProductIn,
    session: AsyncSession = Depends(db_session),
) -> ProductOut:
    try:
        product = await ProductRepo(session).update(
            product_id,
            name=body.name,
            description=body.description,
            price=body.price,
            image_url=body.image_url,
        )
        if product is None:
            raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise _store_failure(e, op="update") from e

    log.info("product_updated", product_id=product_id)
    return ProductOut.model_validate(product)


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    session: AsyncSession = Depends(db_session),
) -> dict[str, int]:
    try:
        deleted = await ProductRepo(session).delete(product_id)
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise _store_failure(e, op="delete") from e

    if not deleted:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    log.info("product_deleted", product_id=product_id)
    return {"id": product_id}


# --- Module Notes -----------------------------------------------------------
# `/search` is declared before `/{product_id}` so the literal path wins the match.
