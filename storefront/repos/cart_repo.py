# storefront/repos/cart_repo.py
from typing import List, Tuple

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import InvalidOwnerError, NotFoundError, ValidationError
from storefront.repos.base import BaseRepo, db_guard
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartRepo(BaseRepo):
    """
    Magazyn koszykow i pozycji.
    Kazda komenda commituje sama - brak transakcji obejmujacej kilka krokow.
    """

    # =====================================================
    # QUERY
    # =====================================================
    @db_guard
    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    @db_guard
    def get_line_item(self, line_item_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, line_item_id)

    @db_guard
    def get_line_items(self, cart_id: int) -> List[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars().all()
        )

    @db_guard
    def find_line_item(self, cart_id: int, product_id: int, is_free: bool) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
                CartItemModel.is_free == is_free,
            )
        ).scalar_one_or_none()

    @db_guard
    def list_line_items_with_product(self, cart_id: int) -> List[Tuple[CartItemModel, ProductModel]]:
        """Pozycje z produktem. Pozycje z usunietym produktem sa pomijane."""
        rows = self.db.execute(
            select(CartItemModel, ProductModel)
            .join(ProductModel, ProductModel.id == CartItemModel.product_id)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
        ).all()
        return [(item, product) for item, product in rows]

    @db_guard
    def list_cart_ids_with_items(self) -> List[int]:
        return list(
            self.db.execute(select(CartItemModel.cart_id).distinct()).scalars().all()
        )

    # =====================================================
    # COMMANDS
    # =====================================================
    @db_guard
    def get_or_create_cart(self, user_id: str | None = None, session_id: str | None = None) -> CartModel:
        #user ma pierwszenstwo przed sesja
        if user_id:
            cart = self.db.execute(
                select(CartModel).where(CartModel.user_id == user_id).order_by(CartModel.id)
            ).scalars().first()
        elif session_id:
            cart = self.db.execute(
                select(CartModel).where(CartModel.session_id == session_id).order_by(CartModel.id)
            ).scalars().first()
        else:
            raise InvalidOwnerError()

        if cart:
            return cart

        cart = CartModel(user_id=user_id or None, session_id=session_id or None)
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        logger.info(f"Utworzono koszyk {cart.id} (user={user_id}, session={session_id})")
        return cart

    @db_guard
    def add_line_item(self, cart_id: int, product_id: int, quantity: int, is_free: bool = False) -> CartItemModel:
        if quantity < 1:
            raise ValidationError("Ilosc musi byc wieksza niz 0")

        existing = self.find_line_item(cart_id, product_id, is_free)
        if existing:
            #ta sama (koszyk, produkt, is_free) -> sumujemy ilosc zamiast duplikatu
            existing.quantity += quantity
            self.db.commit()
            self.db.refresh(existing)
            return existing

        item = CartItemModel(
            cart_id=cart_id,
            product_id=product_id,
            quantity=quantity,
            is_free=is_free,
        )
        self.db.add(item)
        try:
            self.db.commit()
        except IntegrityError:
            #rownolegly insert tej samej pozycji wygral - dopisujemy ilosc do niego
            self.db.rollback()
            item = self.find_line_item(cart_id, product_id, is_free)
            if item is None:
                raise
            logger.info(f"Koszyk {cart_id}: rownolegle dodanie produktu {product_id}, sumujemy ilosc")
            item.quantity += quantity
            self.db.commit()

        self.db.refresh(item)
        return item

    @db_guard
    def set_line_item_quantity(self, line_item_id: int, quantity: int) -> CartItemModel | None:
        """quantity <= 0 usuwa pozycje i zwraca None."""
        if quantity <= 0:
            self.remove_line_item(line_item_id)
            return None

        item = self.db.get(CartItemModel, line_item_id)
        if not item:
            raise NotFoundError("Pozycja koszyka", line_item_id)

        item.quantity = quantity
        self.db.commit()
        self.db.refresh(item)
        return item

    @db_guard
    def remove_line_item(self, line_item_id: int) -> bool:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.id == line_item_id))
        self.db.commit()
        return result.rowcount > 0

    @db_guard
    def clear_cart(self, cart_id: int) -> int:
        #gratisy i platne pozycje razem
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart_id))
        self.db.commit()
        return result.rowcount
