from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import http_error
from storefront.data.database import get_db
from storefront.domain.errors import CartError
from storefront.domain.schemas import BannerIn, BannerOut, BannerUpdate
from storefront.services.banner_service import BannerService

router = APIRouter(prefix="/api/banners", tags=["banners"])


@router.get("", response_model=List[BannerOut])
def list_banners(
    enabled: bool = Query(False, description="tylko wlaczone (sklep)"),
    db: Session = Depends(get_db),
):
    try:
        return BannerService(db).list_banners(enabled_only=enabled)
    except CartError as e:
        raise http_error(e)


@router.get("/{banner_id}", response_model=BannerOut)
def get_banner(banner_id: int, db: Session = Depends(get_db)):
    try:
        return BannerService(db).get_banner(banner_id)
    except CartError as e:
        raise http_error(e)


@router.post("", response_model=BannerOut, status_code=201)
def create_banner(payload: BannerIn, db: Session = Depends(get_db)):
    try:
        return BannerService(db).create_banner(payload)
    except CartError as e:
        raise http_error(e)


@router.put("/{banner_id}", response_model=BannerOut)
def update_banner(banner_id: int, payload: BannerUpdate, db: Session = Depends(get_db)):
    try:
        return BannerService(db).update_banner(banner_id, payload)
    except CartError as e:
        raise http_error(e)


@router.delete("/{banner_id}", status_code=204)
def delete_banner(banner_id: int, db: Session = Depends(get_db)):
    try:
        BannerService(db).delete_banner(banner_id)
    except CartError as e:
        raise http_error(e)
    return Response(status_code=204)
