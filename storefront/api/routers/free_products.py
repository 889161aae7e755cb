from typing import List

from fastapi import APIRouter, Depends, Response

from storefront.api.deps import get_rule_service, http_error
from storefront.domain.errors import CartError
from storefront.domain.schemas import FreeProductRuleIn, FreeProductRuleOut, FreeProductRuleUpdate
from storefront.services.rule_service import FreeProductRuleService

router = APIRouter(prefix="/api/free-products", tags=["free-products"])


@router.get("", response_model=List[FreeProductRuleOut])
def list_rules(service: FreeProductRuleService = Depends(get_rule_service)):
    try:
        return service.list_rules_with_products()
    except CartError as e:
        raise http_error(e)


@router.get("/{rule_id}", response_model=FreeProductRuleOut)
def get_rule(rule_id: int, service: FreeProductRuleService = Depends(get_rule_service)):
    try:
        return service.get_rule(rule_id)
    except CartError as e:
        raise http_error(e)


@router.post("", response_model=FreeProductRuleOut, status_code=201)
def create_rule(payload: FreeProductRuleIn, service: FreeProductRuleService = Depends(get_rule_service)):
    try:
        return service.create_rule(payload)
    except CartError as e:
        raise http_error(e)


@router.put("/{rule_id}", response_model=FreeProductRuleOut)
def update_rule(
    rule_id: int,
    payload: FreeProductRuleUpdate,
    service: FreeProductRuleService = Depends(get_rule_service),
):
    try:
        return service.update_rule(rule_id, payload)
    except CartError as e:
        raise http_error(e)


@router.delete("/{rule_id}", status_code=204)
def delete_rule(rule_id: int, service: FreeProductRuleService = Depends(get_rule_service)):
    try:
        service.delete_rule(rule_id)
    except CartError as e:
        raise http_error(e)
    return Response(status_code=204)
