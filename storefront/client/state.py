# storefront/client/state.py
"""
Niemutowalny stan koszyka po stronie klienta.
Kazda zmiana tworzy nowy obiekt, wiec snapshot to po prostu poprzednia instancja.
"""
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional, Tuple

from storefront.domain.promotions import FreeGiftRule, PricedLine, compute_subtotal


def _decimal(value) -> Decimal:
    return Decimal(str(value))


@dataclass(frozen=True)
class ProductRef:
    id: int
    name: str
    price: Decimal

    @classmethod
    def from_payload(cls, data: dict) -> "ProductRef":
        return cls(id=data["id"], name=data["name"], price=_decimal(data["price"]))


@dataclass(frozen=True)
class ClientLineItem:
    id: int
    product_id: int
    name: str
    unit_price: Decimal
    quantity: int
    is_free: bool = False

    @property
    def is_temporary(self) -> bool:
        #ujemne id = pozycja jeszcze bez id z serwera
        return self.id < 0


@dataclass(frozen=True)
class CartState:
    cart_id: Optional[int] = None
    items: Tuple[ClientLineItem, ...] = ()

    @classmethod
    def from_payload(cls, data: dict) -> "CartState":
        return cls(
            cart_id=data["id"],
            items=tuple(
                ClientLineItem(
                    id=item["id"],
                    product_id=item["productId"],
                    name=item["product"]["name"],
                    unit_price=_decimal(item["product"]["price"]),
                    quantity=item["quantity"],
                    is_free=item["isFree"],
                )
                for item in data["items"]
            ),
        )

    def find(self, line_id: int) -> Optional[ClientLineItem]:
        return next((i for i in self.items if i.id == line_id), None)

    def find_paid(self, product_id: int) -> Optional[ClientLineItem]:
        return next((i for i in self.items if i.product_id == product_id and not i.is_free), None)

    def with_item(self, item: ClientLineItem) -> "CartState":
        return replace(self, items=self.items + (item,))

    def without(self, line_id: int) -> "CartState":
        return replace(self, items=tuple(i for i in self.items if i.id != line_id))

    def update(self, line_id: int, **changes) -> "CartState":
        return replace(
            self,
            items=tuple(replace(i, **changes) if i.id == line_id else i for i in self.items),
        )

    @property
    def paid_items(self) -> Tuple[ClientLineItem, ...]:
        return tuple(i for i in self.items if not i.is_free)

    @property
    def free_items(self) -> Tuple[ClientLineItem, ...]:
        return tuple(i for i in self.items if i.is_free)

    @property
    def subtotal(self) -> Decimal:
        return compute_subtotal(
            PricedLine(i.product_id, i.unit_price, i.quantity, i.is_free) for i in self.items
        )

    @property
    def total_items(self) -> int:
        return sum(i.quantity for i in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass(frozen=True)
class PromotionContext:
    """
    Reguly gratisow pobrane raz i wstrzykniete do klienta.
    Reguly wskazujace usuniety produkt sa pomijane (tak jak na serwerze).
    """

    rules: Tuple[FreeGiftRule, ...] = ()
    products: Tuple[ProductRef, ...] = ()

    @classmethod
    def from_payload(cls, data: list) -> "PromotionContext":
        rules, products = [], []
        for rule in data:
            if rule.get("product") is None:
                continue
            rules.append(
                FreeGiftRule(
                    id=rule["id"],
                    product_id=rule["productId"],
                    min_order_value=_decimal(rule["minOrderValue"]),
                )
            )
            products.append(ProductRef.from_payload(rule["product"]))
        return cls(rules=tuple(rules), products=tuple(products))

    def product(self, product_id: int) -> Optional[ProductRef]:
        return next((p for p in self.products if p.id == product_id), None)
