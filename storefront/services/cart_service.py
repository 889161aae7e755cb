from typing import List
from sqlalchemy.orm import Session
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import CartError, NotFoundError, ValidationError
from storefront.domain.promotions import PricedLine, compute_subtotal, list_eligible_rules
from storefront.domain.schemas import CartLineOut, CartOut, EligibleFreeProductOut, ProductOut
from storefront.repos.cart_repo import CartRepo
from storefront.repos.free_product_repo import FreeProductRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.reconciliation import CartReconciler
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

class CartService:
    """
    Use case'y koszyka.
    commands (add, update, remove, clear, add_free) zmieniaja stan i odpalaja rekoncyliacje gratisow
    query (get, eligible) - get tez przelicza gratisy (odczyt naprawia nieaktualny stan)
    """

    def __init__(self, db: Session, rule_service):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.free_products = FreeProductRepo(db)
        self.rule_service = rule_service
        self.reconciler = CartReconciler(db, rule_service)

    #query
    def get_cart(self, user_id: str | None, session_id: str | None) -> CartOut:
        cart = self.repo.get_or_create_cart(user_id=user_id, session_id=session_id)
        self._reconcile(cart.id)
        return self._hydrate(cart)

    def eligible_free_products(self, cart_id: int) -> List[EligibleFreeProductOut]:
        self._require_cart(cart_id)
        lines = self._priced_lines(cart_id)

        #gratis tylko przy aktywnym zamowieniu
        if not any(not line.is_free for line in lines):
            return []

        subtotal = compute_subtotal(lines)

        eligible = list_eligible_rules(self.rule_service.list_rules(), subtotal)
        products = self.products.get_many(r.product_id for r in eligible)

        #regula z usunietym produktem nie trafia do listy
        return [
            EligibleFreeProductOut(
                free_product_id=rule.id,
                min_order_value=rule.min_order_value,
                product=ProductOut.model_validate(products[rule.product_id]),
            )
            for rule in eligible
            if rule.product_id in products
        ]

    #commands
    def add_item(self, cart_id: int, product_id: int, quantity: int, is_free: bool = False) -> CartItemModel:
        if is_free:
            raise ValidationError("Gratisy dodaje tylko promocja, nie uzytkownik")

        self._require_cart(cart_id)
        if not self.products.get_product(product_id):
            raise NotFoundError("Produkt", product_id)

        item = self.repo.add_line_item(cart_id, product_id, quantity, is_free=False)
        logger.info(f"Koszyk {cart_id}: produkt {product_id} x{quantity} (pozycja {item.id}, razem {item.quantity})")

        self._reconcile(cart_id)
        return item

    def update_item_quantity(self, line_item_id: int, quantity: int) -> CartItemModel | None:
        """
        quantity <= 0 usuwa pozycje (zwraca None), takze gdy jej juz nie ma.
        Brak pozycji przy quantity > 0 -> NotFoundError.
        """
        item = self.repo.get_line_item(line_item_id)

        if not item:
            if quantity <= 0:
                return None
            raise NotFoundError("Pozycja koszyka", line_item_id)

        if item.is_free:
            raise ValidationError("Nie mozna zmieniac ilosci gratisu")

        cart_id = item.cart_id
        updated = self.repo.set_line_item_quantity(line_item_id, quantity)

        if updated is None:
            logger.info(f"Koszyk {cart_id}: pozycja {line_item_id} usunieta (ilosc {quantity})")
        else:
            logger.info(f"Koszyk {cart_id}: pozycja {line_item_id} ilosc {quantity}")

        self._reconcile(cart_id)
        return updated

    def remove_item(self, line_item_id: int) -> bool:
        item = self.repo.get_line_item(line_item_id)
        if not item:
            return False

        cart_id = item.cart_id
        removed = self.repo.remove_line_item(line_item_id)
        if removed:
            logger.info(f"Koszyk {cart_id}: usunieto pozycje {line_item_id}")
            self._reconcile(cart_id)
        return removed

    def clear_cart(self, cart_id: int) -> int:
        removed = self.repo.clear_cart(cart_id)
        logger.info(f"Koszyk {cart_id} wyczyszczony ({removed} pozycji)")
        return removed

    def add_free_product(self, cart_id: int, product_id: int, free_product_id: int) -> CartItemModel:
        """Reczne dodanie gratisu - z walidacja progu."""
        rule = self.free_products.get_rule(free_product_id)
        if not rule:
            raise NotFoundError("Regula gratisu", free_product_id)

        if rule.product_id != product_id:
            raise ValidationError("Produkt nie zgadza sie z regula gratisu")

        self._require_cart(cart_id)
        if not self.products.get_product(product_id):
            raise NotFoundError("Produkt", product_id)

        lines = self._priced_lines(cart_id)
        if not any(not line.is_free for line in lines):
            raise ValidationError("Gratis wymaga platnych produktow w koszyku")

        subtotal = compute_subtotal(lines)
        if subtotal < rule.min_order_value:
            raise ValidationError(
                f"Wartosc koszyka musi wynosic co najmniej {rule.min_order_value} "
                f"(obecnie {subtotal})"
            )

        if self.repo.find_line_item(cart_id, product_id, is_free=True):
            raise ValidationError("Ten gratis jest juz w koszyku")

        item = self.repo.add_line_item(cart_id, product_id, 1, is_free=True)
        logger.info(f"Koszyk {cart_id}: dodano gratis {product_id} (regula {rule.id})")
        return item

    #helpers
    def _require_cart(self, cart_id: int) -> CartModel:
        cart = self.repo.get_cart(cart_id)
        if not cart:
            raise NotFoundError("Koszyk", cart_id)
        return cart

    def _priced_lines(self, cart_id: int) -> List[PricedLine]:
        #pozycje z usunietym produktem pominiete
        return [
            PricedLine(
                product_id=item.product_id,
                unit_price=product.price,
                quantity=item.quantity,
                is_free=item.is_free,
            )
            for item, product in self.repo.list_line_items_with_product(cart_id)
        ]

    def _reconcile(self, cart_id: int) -> None:
        #zmiana platnej pozycji juz zapisana; blad rekoncyliacji nie cofa jej
        try:
            self.reconciler.reconcile(cart_id)
        except CartError as e:
            logger.warning(f"Koszyk {cart_id}: rekoncyliacja przerwana: {e}")

    def _hydrate(self, cart: CartModel) -> CartOut:
        lines = self.repo.list_line_items_with_product(cart.id)

        items = [
            CartLineOut(
                id=item.id,
                cart_id=item.cart_id,
                product_id=item.product_id,
                quantity=item.quantity,
                is_free=item.is_free,
                product=ProductOut.model_validate(product),
            )
            for item, product in lines
        ]
        subtotal = compute_subtotal(
            PricedLine(i.product_id, i.product.price, i.quantity, i.is_free) for i in items
        )

        return CartOut(
            id=cart.id,
            user_id=cart.user_id,
            session_id=cart.session_id,
            items=items,
            subtotal=subtotal,
            total_items=sum(i.quantity for i in items),
        )
