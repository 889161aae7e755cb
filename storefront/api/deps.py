# storefront/api/deps.py
from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import (
    CartError,
    ConflictError,
    DownstreamUnavailable,
    NotFoundError,
    ValidationError,
)
from storefront.services.reconcile_dispatcher import ReconcileDispatcher
from storefront.services.rule_cache import RuleCache
from storefront.services.rule_service import FreeProductRuleService

_rule_cache: RuleCache | None = None


def get_rule_cache() -> RuleCache:
    #jeden klient redis na proces
    global _rule_cache
    if _rule_cache is None:
        _rule_cache = RuleCache()
    return _rule_cache


def get_dispatcher() -> ReconcileDispatcher:
    return ReconcileDispatcher()


def get_rule_service(
    db: Session = Depends(get_db),
    cache: RuleCache = Depends(get_rule_cache),
    dispatcher: ReconcileDispatcher = Depends(get_dispatcher),
) -> FreeProductRuleService:
    return FreeProductRuleService(db, cache=cache, dispatcher=dispatcher)


_STATUS = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (DownstreamUnavailable, 503),
)


def http_error(e: CartError) -> HTTPException:
    for exc_type, status_code in _STATUS:
        if isinstance(e, exc_type):
            return HTTPException(status_code=status_code, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))
