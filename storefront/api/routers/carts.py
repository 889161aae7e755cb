#storefront/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_rule_service, http_error
from storefront.data.database import get_db
from storefront.domain.errors import CartError
from storefront.domain.schemas import (
    AddFreeProductIn,
    AddItemIn,
    CartLineItemOut,
    CartOut,
    DeletedItemOut,
    EligibleFreeProductOut,
    UpdateQuantityIn,
)
from storefront.services.cart_service import CartService
from storefront.services.rule_service import FreeProductRuleService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(db: Session, rule_service: FreeProductRuleService):
    return CartService(db=db, rule_service=rule_service)


@router.get("", response_model=CartOut)
def get_cart(
    user_id: str | None = Query(None, alias="userId"),
    session_id: str | None = Query(None, alias="sessionId"),
    db: Session = Depends(get_db),
    rule_service: FreeProductRuleService = Depends(get_rule_service),
):
    svc = get_service(db, rule_service)
    try:
        return svc.get_cart(user_id=user_id, session_id=session_id)
    except CartError as e:
        raise http_error(e)


@router.post("/items", response_model=CartLineItemOut, status_code=201)
def add_item(
    payload: AddItemIn,
    db: Session = Depends(get_db),
    rule_service: FreeProductRuleService = Depends(get_rule_service),
):
    svc = get_service(db, rule_service)
    try:
        return svc.add_item(
            cart_id=payload.cart_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            is_free=payload.is_free,
        )
    except CartError as e:
        raise http_error(e)


@router.put("/items/{item_id}", response_model=CartLineItemOut | DeletedItemOut)
def update_item(
    item_id: int,
    payload: UpdateQuantityIn,
    db: Session = Depends(get_db),
    rule_service: FreeProductRuleService = Depends(get_rule_service),
):
    svc = get_service(db, rule_service)
    try:
        updated = svc.update_item_quantity(item_id, payload.quantity)
    except CartError as e:
        raise http_error(e)

    if updated is None:
        return DeletedItemOut(id=item_id)
    return CartLineItemOut.model_validate(updated)


@router.delete("/items/{item_id}", status_code=204)
def remove_item(
    item_id: int,
    db: Session = Depends(get_db),
    rule_service: FreeProductRuleService = Depends(get_rule_service),
):
    svc = get_service(db, rule_service)
    try:
        removed = svc.remove_item(item_id)
    except CartError as e:
        raise http_error(e)

    if not removed:
        raise HTTPException(status_code=404, detail="Pozycja koszyka nie znaleziona")
    return Response(status_code=204)


@router.delete("/{cart_id}", status_code=204)
def clear_cart(
    cart_id: int,
    db: Session = Depends(get_db),
    rule_service: FreeProductRuleService = Depends(get_rule_service),
):
    svc = get_service(db, rule_service)
    try:
        svc.clear_cart(cart_id)
    except CartError as e:
        raise http_error(e)
    return Response(status_code=204)


@router.get("/{cart_id}/eligible-free-products", response_model=List[EligibleFreeProductOut])
def eligible_free_products(
    cart_id: int,
    db: Session = Depends(get_db),
    rule_service: FreeProductRuleService = Depends(get_rule_service),
):
    svc = get_service(db, rule_service)
    try:
        return svc.eligible_free_products(cart_id)
    except CartError as e:
        raise http_error(e)


@router.post("/{cart_id}/add-free-product", response_model=CartLineItemOut, status_code=201)
def add_free_product(
    cart_id: int,
    payload: AddFreeProductIn,
    db: Session = Depends(get_db),
    rule_service: FreeProductRuleService = Depends(get_rule_service),
):
    svc = get_service(db, rule_service)
    try:
        return svc.add_free_product(cart_id, payload.product_id, payload.free_product_id)
    except CartError as e:
        raise http_error(e)
