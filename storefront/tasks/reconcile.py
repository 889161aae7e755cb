# storefront/tasks/reconcile.py
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.domain.errors import CartError
from storefront.repos.cart_repo import CartRepo
from storefront.services.reconciliation import CartReconciler
from storefront.services.rule_cache import RuleCache
from storefront.services.rule_service import FreeProductRuleService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def reconcile_carts(db: Session, rule_service, cart_ids: list[int] | None = None) -> int:
    """Przelicza gratisy w podanych koszykach (domyslnie we wszystkich niepustych)."""
    if cart_ids is None:
        cart_ids = CartRepo(db).list_cart_ids_with_items()

    logger.info(f"Found {len(cart_ids)} carts to reconcile")

    reconciler = CartReconciler(db, rule_service)
    changed = 0
    for cart_id in cart_ids:
        try:
            if reconciler.reconcile(cart_id).changed:
                changed += 1
        except (CartError, SQLAlchemyError) as e:
            db.rollback()
            logger.warning(f"Failed to reconcile cart {cart_id}: {e}")
    return changed


@celery_app.task(name="storefront.tasks.reconcile.reconcile_carts_task")
def reconcile_carts_task(cart_ids: list[int] | None = None):
    logger.info("Reconcile carts task started")

    db = SessionLocal()
    try:
        rule_service = FreeProductRuleService(db, cache=RuleCache())
        changed = reconcile_carts(db, rule_service, cart_ids)
        logger.info(f"Reconcile carts task finished, {changed} carts changed")
        return changed
    finally:
        db.close()
