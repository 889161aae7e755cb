# storefront/client/cart_client.py
import itertools
import uuid
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

import requests

from storefront.client.state import CartState, ClientLineItem, ProductRef, PromotionContext
from storefront.domain.promotions import FreeGiftRule, list_eligible_rules
from storefront.utils.retry import http_retry
from storefront.utils.settings import CART_API_URL, HTTP_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartClientError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CartClient:
    """
    Kliencki proxy koszyka z optimistic updates.

    -kazda komenda: snapshot stanu -> zmiana lokalna -> request
    -blad requestu: przywrocenie snapshotu 1:1 i CartClientError
    -watch: zmiana sumy albo regul -> lokalne przeliczenie gratisow,
     zrodlem prawdy pozostaje serwer (refresh)
    """

    def __init__(
        self,
        base_url: str | None = None,
        session_id: str | None = None,
        user_id: str | None = None,
        http: requests.Session | None = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        promotions: PromotionContext | None = None,
    ):
        self.base_url = (base_url or CART_API_URL).rstrip("/")
        self.user_id = user_id
        self.session_id = session_id or (None if user_id else f"session_{uuid.uuid4().hex}")
        self.http = http or requests.Session()
        self.timeout = timeout

        self._promotions = promotions
        self._state = CartState()
        self._eligible: Tuple[FreeGiftRule, ...] = ()
        self._watched = None
        self._temp_ids = itertools.count(-1, -1)
        self._listeners: List[Callable[[CartState], None]] = []

    # =====================================================
    # HTTP
    # =====================================================
    @http_retry()
    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.info(f"CartClient {method} {url}")

        resp = self.http.request(method, url, timeout=self.timeout, **kwargs)
        resp.raise_for_status()
        return resp

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            return self._send(method, path, **kwargs)
        except requests.RequestException as e:
            status = e.response.status_code if e.response is not None else None
            raise CartClientError(f"{method} {path} nie powiodl sie: {e}", status_code=status) from e

    def _request_json(self, method: str, path: str, fields: Tuple[str, ...] = (), **kwargs):
        """Jak _request, ale zwraca JSON; zla odpowiedz 2xx tez jest CartClientError."""
        resp = self._request(method, path, **kwargs)
        try:
            data = resp.json()
        except ValueError as e:
            raise CartClientError(
                f"{method} {path}: odpowiedz nie jest JSON-em: {e}", status_code=resp.status_code
            ) from e

        if fields and (not isinstance(data, dict) or any(f not in data for f in fields)):
            raise CartClientError(
                f"{method} {path}: w odpowiedzi brakuje pol {list(fields)}", status_code=resp.status_code
            )
        return data

    # =====================================================
    # STAN
    # =====================================================
    @property
    def state(self) -> CartState:
        return self._state

    @property
    def cart_id(self) -> Optional[int]:
        return self._state.cart_id

    @property
    def items(self) -> Tuple[ClientLineItem, ...]:
        return self._state.items

    @property
    def subtotal(self) -> Decimal:
        return self._state.subtotal

    @property
    def total_items(self) -> int:
        return self._state.total_items

    @property
    def is_empty(self) -> bool:
        return self._state.is_empty

    @property
    def promotions(self) -> PromotionContext:
        return self._promotions or PromotionContext()

    @property
    def eligible_free_products(self) -> List[ProductRef]:
        products = (self.promotions.product(r.product_id) for r in self._eligible)
        return [p for p in products if p is not None]

    def subscribe(self, listener: Callable[[CartState], None]) -> None:
        self._listeners.append(listener)

    def _emit(self) -> None:
        for listener in self._listeners:
            listener(self._state)

    def _watch_key(self, state: CartState):
        return (state.subtotal, bool(state.paid_items), self.promotions.rules)

    def _recompute_eligible(self, state: CartState) -> None:
        if state.paid_items:
            self._eligible = tuple(list_eligible_rules(self.promotions.rules, state.subtotal))
        else:
            self._eligible = ()
        self._watched = self._watch_key(state)

    def _commit(self, state: CartState) -> None:
        """Zmiana lokalna + watch (lustro rekoncyliacji z serwera)."""
        if self._watch_key(state) != self._watched:
            self._recompute_eligible(state)
            state = self._mirror_free_items(state)
        self._state = state
        self._emit()

    def _set_server_state(self, state: CartState) -> None:
        #stan z serwera przyjmujemy bez lokalnych poprawek
        self._recompute_eligible(state)
        self._state = state
        self._emit()

    def _restore(self, snapshot: CartState) -> None:
        self._recompute_eligible(snapshot)
        self._state = snapshot
        self._emit()

    def _mirror_free_items(self, state: CartState) -> CartState:
        eligible_ids = [
            r.product_id for r in self._eligible if self.promotions.product(r.product_id) is not None
        ]

        for item in state.free_items:
            if item.product_id not in eligible_ids:
                state = state.without(item.id)

        present = {i.product_id for i in state.free_items}
        for product_id in eligible_ids:
            if product_id in present:
                continue
            product = self.promotions.product(product_id)
            state = state.with_item(
                ClientLineItem(
                    id=next(self._temp_ids),
                    product_id=product.id,
                    name=product.name,
                    unit_price=product.price,
                    quantity=1,
                    is_free=True,
                )
            )
        return state

    # =====================================================
    # QUERY
    # =====================================================
    def load(self) -> CartState:
        """Pobiera koszyk; reguly gratisow tylko za pierwszym razem."""
        if self._promotions is None:
            rules = self._request_json("GET", "/api/free-products")
            self._promotions = PromotionContext.from_payload(rules)
        return self.refresh()

    def refresh(self) -> CartState:
        params = {"userId": self.user_id} if self.user_id else {"sessionId": self.session_id}
        data = self._request_json("GET", "/api/cart", ("id", "items"), params=params)
        self._set_server_state(CartState.from_payload(data))
        return self._state

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_item(self, product: ProductRef) -> ClientLineItem:
        if self._state.cart_id is None:
            self.load()

        snapshot = self._state
        existing = snapshot.find_paid(product.id)

        try:
            if existing:
                quantity = existing.quantity + 1
                self._commit(snapshot.update(existing.id, quantity=quantity))

                data = self._request_json(
                    "PUT", f"/api/cart/items/{existing.id}", ("id",), json={"quantity": quantity}
                )
                line_id = existing.id
            else:
                temp = ClientLineItem(
                    id=next(self._temp_ids),
                    product_id=product.id,
                    name=product.name,
                    unit_price=product.price,
                    quantity=1,
                )
                self._commit(snapshot.with_item(temp))

                data = self._request_json(
                    "POST",
                    "/api/cart/items",
                    ("id",),
                    json={
                        "cartId": snapshot.cart_id,
                        "productId": product.id,
                        "quantity": 1,
                        "isFree": False,
                    },
                )
                #tymczasowe id -> id z serwera
                line_id = data["id"]
                self._commit(self._state.update(temp.id, id=line_id))
        except CartClientError as e:
            logger.error(f"Nie udalo sie dodac produktu {product.id} do koszyka: {e}")
            self._restore(snapshot)
            raise

        if data.get("quantity") is not None:
            self._commit(self._state.update(line_id, quantity=data["quantity"]))
        return self._state.find(line_id)

    def remove_item(self, line_id: int) -> bool:
        snapshot = self._state
        item = snapshot.find(line_id)

        if item is not None and item.is_temporary:
            #lokalny gratis bez odpowiednika na serwerze
            self._commit(snapshot.without(line_id))
            return True

        if item is not None:
            self._commit(snapshot.without(line_id))

        try:
            self._request("DELETE", f"/api/cart/items/{line_id}")
        except CartClientError as e:
            if e.status_code == 404:
                #juz usunieta na serwerze - stan lokalny jest poprawny
                return False
            logger.error(f"Nie udalo sie usunac pozycji {line_id}: {e}")
            self._restore(snapshot)
            raise
        return True

    def update_quantity(self, line_id: int, quantity: int) -> Optional[ClientLineItem]:
        if quantity <= 0:
            self.remove_item(line_id)
            return None

        snapshot = self._state
        if snapshot.find(line_id) is not None:
            self._commit(snapshot.update(line_id, quantity=quantity))

        try:
            self._request("PUT", f"/api/cart/items/{line_id}", json={"quantity": quantity})
        except CartClientError as e:
            logger.error(f"Nie udalo sie zmienic ilosci pozycji {line_id}: {e}")
            self._restore(snapshot)
            raise
        return self._state.find(line_id)

    def clear_cart(self) -> None:
        snapshot = self._state
        if snapshot.cart_id is None:
            return

        #najpierw gratisy (jak na serwerze), potem reszta
        self._commit(CartState(cart_id=snapshot.cart_id, items=snapshot.paid_items))
        self._commit(CartState(cart_id=snapshot.cart_id))

        try:
            self._request("DELETE", f"/api/cart/{snapshot.cart_id}")
        except CartClientError as e:
            logger.error(f"Nie udalo sie wyczyscic koszyka {snapshot.cart_id}: {e}")
            self._restore(snapshot)
            raise
