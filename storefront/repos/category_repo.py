from typing import List

from sqlalchemy import select

from storefront.data.models.category import CategoryModel
from storefront.repos.base import BaseRepo, db_guard


class CategoryRepo(BaseRepo):

    @db_guard
    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    @db_guard
    def get_by_slug(self, slug: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.slug == slug)
        ).scalar_one_or_none()

    @db_guard
    def list_categories(self) -> List[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.name)).scalars().all())

    @db_guard
    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    @db_guard
    def update_category(self, category: CategoryModel, data: dict) -> CategoryModel:
        for key, value in data.items():
            setattr(category, key, value)
        self.db.commit()
        self.db.refresh(category)
        return category

    @db_guard
    def delete_category(self, category: CategoryModel) -> None:
        self.db.delete(category)
        self.db.commit()
