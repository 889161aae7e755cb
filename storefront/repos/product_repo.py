# storefront/repos/product_repo.py
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy import select, func, or_

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.repos.base import BaseRepo, db_guard

SORTS = {
    "newest": (ProductModel.created_at.desc(), ProductModel.id.desc()),
    "price_asc": (ProductModel.price.asc(), ProductModel.id),
    "price_desc": (ProductModel.price.desc(), ProductModel.id),
    "name": (ProductModel.name.asc(), ProductModel.id),
}

COLLECTIONS = {
    "featured": ProductModel.featured,
    "bestseller": ProductModel.bestseller,
    "new": ProductModel.is_new,
}


@dataclass
class ProductFilter:
    category_id: int | None = None
    category_slug: str | None = None
    collection: str | None = None
    search: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    sort: str = "newest"
    page: int = 1
    limit: int = 20


class ProductRepo(BaseRepo):

    @db_guard
    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    @db_guard
    def get_by_slug(self, slug: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.slug == slug)
        ).scalar_one_or_none()

    @db_guard
    def get_by_sku(self, sku: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.sku == sku)
        ).scalar_one_or_none()

    @db_guard
    def get_many(self, product_ids) -> dict:
        ids = set(product_ids)
        if not ids:
            return {}
        rows = self.db.execute(select(ProductModel).where(ProductModel.id.in_(ids))).scalars().all()
        return {p.id: p for p in rows}

    @db_guard
    def list_products(self, flt: ProductFilter) -> Tuple[List[ProductModel], int]:
        stmt = select(ProductModel)

        if flt.category_id is not None:
            stmt = stmt.where(ProductModel.category_id == flt.category_id)
        if flt.category_slug:
            stmt = stmt.join(CategoryModel, CategoryModel.id == ProductModel.category_id).where(
                CategoryModel.slug == flt.category_slug
            )
        if flt.collection:
            stmt = stmt.where(COLLECTIONS[flt.collection].is_(True))
        if flt.search:
            pattern = f"%{flt.search.strip()}%"
            stmt = stmt.where(
                or_(ProductModel.name.ilike(pattern), ProductModel.description.ilike(pattern))
            )
        if flt.min_price is not None:
            stmt = stmt.where(ProductModel.price >= flt.min_price)
        if flt.max_price is not None:
            stmt = stmt.where(ProductModel.price <= flt.max_price)

        total = self.db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()

        stmt = stmt.order_by(*SORTS[flt.sort]).offset((flt.page - 1) * flt.limit).limit(flt.limit)
        return list(self.db.execute(stmt).scalars().all()), total

    @db_guard
    def count_in_category(self, category_id: int) -> int:
        return self.db.execute(
            select(func.count(ProductModel.id)).where(ProductModel.category_id == category_id)
        ).scalar_one()

    @db_guard
    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    @db_guard
    def update_product(self, product: ProductModel, data: dict) -> ProductModel:
        for key, value in data.items():
            setattr(product, key, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    @db_guard
    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()
