# storefront/api/routers/products.py
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import http_error
from storefront.data.database import get_db
from storefront.domain.errors import CartError
from storefront.domain.schemas import ProductIn, ProductOut, ProductPage, ProductUpdate
from storefront.repos.product_repo import ProductFilter
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/products", tags=["products"])


def get_service(db: Session):
    return CatalogService(db)


@router.get("", response_model=ProductPage)
def list_products(
    category_id: int | None = Query(None, alias="categoryId"),
    category: str | None = Query(None, description="slug kategorii"),
    collection: str | None = Query(None, description="featured | bestseller | new"),
    search: str | None = Query(None),
    min_price: Decimal | None = Query(None, alias="minPrice"),
    max_price: Decimal | None = Query(None, alias="maxPrice"),
    sort: str = Query("newest"),
    page: int = Query(1),
    limit: int = Query(20),
    db: Session = Depends(get_db),
):
    """
    Lista produktow z filtrami i stronicowaniem.
    """
    svc = get_service(db)
    flt = ProductFilter(
        category_id=category_id,
        category_slug=category,
        collection=collection,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        page=page,
        limit=limit,
    )
    try:
        return svc.list_products(flt)
    except CartError as e:
        raise http_error(e)


@router.get("/slug/{slug}", response_model=ProductOut)
def get_product_by_slug(slug: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_product_by_slug(slug)
    except CartError as e:
        raise http_error(e)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_product(product_id)
    except CartError as e:
        raise http_error(e)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.create_product(payload)
    except CartError as e:
        raise http_error(e)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_product(product_id, payload)
    except CartError as e:
        raise http_error(e)


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    """
    Usuwa produkt. Pozycje koszykow i reguly gratisow zostaja (pomijane przy odczycie).
    """
    svc = get_service(db)
    try:
        svc.delete_product(product_id)
    except CartError as e:
        raise http_error(e)
    return Response(status_code=204)
