# storefront/services/rule_service.py
from decimal import Decimal
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.free_product import FreeProductModel
from storefront.domain.errors import ConflictError, NotFoundError
from storefront.domain.promotions import FreeGiftRule
from storefront.domain.schemas import (
    FreeProductRuleIn,
    FreeProductRuleOut,
    FreeProductRuleUpdate,
    ProductOut,
)
from storefront.repos.free_product_repo import FreeProductRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class FreeProductRuleService:
    """
    Reguly gratisow: zrodlo zestawu regul dla rekoncyliacji (list_rules)
    i CRUD dla panelu admina.
    Kazda zmiana czysci cache i planuje przeliczenie koszykow.
    """

    def __init__(self, db: Session, cache=None, dispatcher=None):
        self.repo = FreeProductRepo(db)
        self.products = ProductRepo(db)
        self.cache = cache
        self.dispatcher = dispatcher

    #query
    def list_rules(self) -> List[FreeGiftRule]:
        if self.cache is not None:
            cached = self.cache.get_rules()
            if cached is not None:
                return cached

        rules = [self._to_rule(m) for m in self.repo.list_rules()]

        if self.cache is not None:
            self.cache.set_rules(rules)
        return rules

    def list_rules_with_products(self) -> List[FreeProductRuleOut]:
        models = self.repo.list_rules()
        products = self.products.get_many(m.product_id for m in models)
        return [self._to_out(m, products.get(m.product_id)) for m in models]

    def get_rule(self, rule_id: int) -> FreeProductRuleOut:
        rule = self.repo.get_rule(rule_id)
        if not rule:
            raise NotFoundError("Regula gratisu", rule_id)
        return self._to_out(rule, self.products.get_product(rule.product_id))

    #commands
    def create_rule(self, payload: FreeProductRuleIn) -> FreeProductRuleOut:
        product = self.products.get_product(payload.product_id)
        if not product:
            raise NotFoundError("Produkt", payload.product_id)

        #jedna regula na produkt - odrzucamy przy tworzeniu
        if self.repo.get_by_product(payload.product_id):
            raise ConflictError(f"Produkt {payload.product_id} ma juz regule gratisu")

        try:
            rule = self.repo.create_rule(
                FreeProductModel(
                    product_id=payload.product_id,
                    min_order_value=payload.min_order_value,
                )
            )
        except IntegrityError as e:
            self.repo.rollback()
            raise ConflictError(f"Produkt {payload.product_id} ma juz regule gratisu") from e

        logger.info(
            f"Utworzono regule {rule.id}: produkt {rule.product_id} od {rule.min_order_value}"
        )
        self._rules_changed()
        return self._to_out(rule, product)

    def update_rule(self, rule_id: int, payload: FreeProductRuleUpdate) -> FreeProductRuleOut:
        rule = self.repo.get_rule(rule_id)
        if not rule:
            raise NotFoundError("Regula gratisu", rule_id)

        data = payload.model_dump(exclude_unset=True, exclude_none=True)

        if "product_id" in data and data["product_id"] != rule.product_id:
            if not self.products.get_product(data["product_id"]):
                raise NotFoundError("Produkt", data["product_id"])
            if self.repo.get_by_product(data["product_id"]):
                raise ConflictError(f"Produkt {data['product_id']} ma juz regule gratisu")

        try:
            rule = self.repo.update_rule(rule, data)
        except IntegrityError as e:
            self.repo.rollback()
            raise ConflictError("Produkt ma juz regule gratisu") from e

        logger.info(f"Zaktualizowano regule {rule.id}")
        self._rules_changed()
        return self._to_out(rule, self.products.get_product(rule.product_id))

    def delete_rule(self, rule_id: int) -> None:
        rule = self.repo.get_rule(rule_id)
        if not rule:
            raise NotFoundError("Regula gratisu", rule_id)

        self.repo.delete_rule(rule)
        logger.info(f"Usunieto regule {rule_id}")
        self._rules_changed()

    def _rules_changed(self) -> None:
        if self.cache is not None:
            self.cache.invalidate()
        if self.dispatcher is not None:
            self.dispatcher.schedule_sweep()

    @staticmethod
    def _to_rule(model: FreeProductModel) -> FreeGiftRule:
        return FreeGiftRule(
            id=model.id,
            product_id=model.product_id,
            min_order_value=Decimal(model.min_order_value),
        )

    @staticmethod
    def _to_out(model: FreeProductModel, product) -> FreeProductRuleOut:
        return FreeProductRuleOut(
            id=model.id,
            product_id=model.product_id,
            min_order_value=model.min_order_value,
            created_at=model.created_at,
            product=ProductOut.model_validate(product) if product is not None else None,
        )
