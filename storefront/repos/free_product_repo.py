# storefront/repos/free_product_repo.py
from typing import List

from sqlalchemy import select

from storefront.data.models.free_product import FreeProductModel
from storefront.repos.base import BaseRepo, db_guard


class FreeProductRepo(BaseRepo):

    @db_guard
    def get_rule(self, rule_id: int) -> FreeProductModel | None:
        return self.db.get(FreeProductModel, rule_id)

    @db_guard
    def get_by_product(self, product_id: int) -> FreeProductModel | None:
        return self.db.execute(
            select(FreeProductModel).where(FreeProductModel.product_id == product_id)
        ).scalar_one_or_none()

    @db_guard
    def list_rules(self) -> List[FreeProductModel]:
        return list(
            self.db.execute(
                select(FreeProductModel).order_by(FreeProductModel.min_order_value, FreeProductModel.id)
            ).scalars().all()
        )

    @db_guard
    def create_rule(self, rule: FreeProductModel) -> FreeProductModel:
        self.db.add(rule)
        self.db.commit()
        self.db.refresh(rule)
        return rule

    @db_guard
    def update_rule(self, rule: FreeProductModel, data: dict) -> FreeProductModel:
        for key, value in data.items():
            setattr(rule, key, value)
        self.db.commit()
        self.db.refresh(rule)
        return rule

    @db_guard
    def delete_rule(self, rule: FreeProductModel) -> None:
        self.db.delete(rule)
        self.db.commit()
