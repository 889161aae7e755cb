from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.api.deps import http_error
from storefront.data.database import get_db
from storefront.domain.errors import CartError
from storefront.domain.schemas import CategoryIn, CategoryOut, CategoryUpdate
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CatalogService(db).list_categories()


@router.get("/slug/{slug}", response_model=CategoryOut)
def get_category_by_slug(slug: str, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).get_category_by_slug(slug)
    except CartError as e:
        raise http_error(e)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).get_category(category_id)
    except CartError as e:
        raise http_error(e)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).create_category(payload)
    except CartError as e:
        raise http_error(e)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).update_category(category_id, payload)
    except CartError as e:
        raise http_error(e)


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    try:
        CatalogService(db).delete_category(category_id)
    except CartError as e:
        raise http_error(e)
    return Response(status_code=204)
