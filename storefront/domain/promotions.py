# storefront/domain/promotions.py
"""
Silnik regul gratisow. Czyste funkcje - uzywane przez serwer (rekoncyliacja)
i przez klienta (lokalne przeliczenie przed odpowiedzia serwera).
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List


@dataclass(frozen=True)
class FreeGiftRule:
    id: int
    product_id: int
    min_order_value: Decimal


@dataclass(frozen=True)
class PricedLine:
    """Minimalny widok pozycji potrzebny do policzenia sumy."""

    product_id: int
    unit_price: Decimal
    quantity: int
    is_free: bool = False


def compute_subtotal(lines: Iterable[PricedLine]) -> Decimal:
    #tylko platne pozycje, gratisy nie licza sie do progu
    return sum(
        (line.unit_price * line.quantity for line in lines if not line.is_free),
        Decimal("0.00"),
    )


def list_eligible_rules(rules: Iterable[FreeGiftRule], non_free_subtotal: Decimal) -> List[FreeGiftRule]:
    """
    Zwraca wszystkie reguly spelnione przez sume (>=, remis sie liczy).
    Reguly sa niezalezne - koszyk moze miec kilka gratisow naraz.
    """
    subtotal = Decimal(non_free_subtotal)
    return [rule for rule in rules if subtotal >= rule.min_order_value]
