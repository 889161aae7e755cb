# storefront/services/reconciliation.py
"""
Rekoncyliacja gratisow w koszyku.

Po kazdej zmianie platnych pozycji zbior darmowych pozycji ma byc rowny
zbiorowi produktow ze spelnionych regul:
1. suma platnych pozycji
2. brak platnych pozycji -> usuwamy wszystkie gratisy
3. w przeciwnym razie liczymy spelnione reguly
4. dodajemy brakujace gratisy (ilosc 1)
5. usuwamy gratisy spoza spelnionych regul

Best effort: blad przy jednej regule jest logowany i pomijany, kazdy krok
commituje osobno. Kolejne uruchomienie naprawia wczesniejsze braki.
"""
from dataclasses import dataclass, field
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.domain.errors import CartError
from storefront.domain.promotions import PricedLine, compute_subtotal, list_eligible_rules
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ReconcileResult:
    cart_id: int
    added: List[int] = field(default_factory=list)
    removed: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


class CartReconciler:

    def __init__(self, db: Session, rule_service):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.rule_service = rule_service

    def reconcile(self, cart_id: int) -> ReconcileResult:
        result = ReconcileResult(cart_id=cart_id)

        lines = self.repo.list_line_items_with_product(cart_id)
        paid = [
            PricedLine(
                product_id=item.product_id,
                unit_price=product.price,
                quantity=item.quantity,
            )
            for item, product in lines
            if not item.is_free
        ]
        #wszystkie gratisy, takze te z usunietym produktem
        free_items = [item for item in self.repo.get_line_items(cart_id) if item.is_free]

        if not paid:
            #gratis wymaga aktywnego zamowienia, nie historycznej sumy
            for item in free_items:
                self._remove(item, result)
            self._log(result)
            return result

        subtotal = compute_subtotal(paid)
        eligible = list_eligible_rules(self.rule_service.list_rules(), subtotal)
        eligible_ids = {rule.product_id for rule in eligible}
        present_ids = {item.product_id for item in free_items}

        for rule in eligible:
            try:
                if not self.products.get_product(rule.product_id):
                    logger.warning(
                        f"Koszyk {cart_id}: regula {rule.id} wskazuje nieistniejacy produkt "
                        f"{rule.product_id}, pomijam"
                    )
                    eligible_ids.discard(rule.product_id)
                    result.skipped.append(rule.product_id)
                    continue

                if rule.product_id in present_ids:
                    continue

                self.repo.add_line_item(cart_id, rule.product_id, 1, is_free=True)
                result.added.append(rule.product_id)
            except (CartError, SQLAlchemyError) as e:
                self.repo.rollback()
                logger.warning(f"Koszyk {cart_id}: nie udalo sie dodac gratisu {rule.product_id}: {e}")
                result.skipped.append(rule.product_id)

        for item in free_items:
            if item.product_id not in eligible_ids:
                self._remove(item, result)

        self._log(result, subtotal)
        return result

    def _remove(self, item, result: ReconcileResult) -> None:
        product_id = item.product_id
        try:
            self.repo.remove_line_item(item.id)
            result.removed.append(product_id)
        except (CartError, SQLAlchemyError) as e:
            self.repo.rollback()
            logger.warning(f"Koszyk {result.cart_id}: nie udalo sie usunac gratisu {product_id}: {e}")
            result.skipped.append(product_id)

    @staticmethod
    def _log(result: ReconcileResult, subtotal=None) -> None:
        if result.changed:
            logger.info(
                f"Koszyk {result.cart_id}: rekoncyliacja gratisow (suma {subtotal}), "
                f"dodane {result.added}, usuniete {result.removed}"
            )
