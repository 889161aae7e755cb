from typing import List

from sqlalchemy import select

from storefront.data.models.banner import BannerModel
from storefront.repos.base import BaseRepo, db_guard


class BannerRepo(BaseRepo):

    @db_guard
    def get_banner(self, banner_id: int) -> BannerModel | None:
        return self.db.get(BannerModel, banner_id)

    @db_guard
    def list_banners(self, enabled_only: bool = False) -> List[BannerModel]:
        stmt = select(BannerModel)
        if enabled_only:
            stmt = stmt.where(BannerModel.enabled.is_(True))
        return list(self.db.execute(stmt.order_by(BannerModel.position, BannerModel.id)).scalars().all())

    @db_guard
    def create_banner(self, banner: BannerModel) -> BannerModel:
        self.db.add(banner)
        self.db.commit()
        self.db.refresh(banner)
        return banner

    @db_guard
    def update_banner(self, banner: BannerModel, data: dict) -> BannerModel:
        for key, value in data.items():
            setattr(banner, key, value)
        self.db.commit()
        self.db.refresh(banner)
        return banner

    @db_guard
    def delete_banner(self, banner: BannerModel) -> None:
        self.db.delete(banner)
        self.db.commit()
