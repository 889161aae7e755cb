# storefront/services/banner_service.py
from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.banner import BannerModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import BannerIn, BannerUpdate
from storefront.repos.banner_repo import BannerRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

NULLABLE_BANNER_FIELDS = {"subtitle", "link_url"}


class BannerService:
    """Banery strony glownej - CRUD dla panelu admina, lista dla sklepu."""

    def __init__(self, db: Session):
        self.repo = BannerRepo(db)

    def list_banners(self, enabled_only: bool = False) -> List[BannerModel]:
        return self.repo.list_banners(enabled_only=enabled_only)

    def get_banner(self, banner_id: int) -> BannerModel:
        banner = self.repo.get_banner(banner_id)
        if not banner:
            raise NotFoundError("Baner", banner_id)
        return banner

    def create_banner(self, payload: BannerIn) -> BannerModel:
        banner = self.repo.create_banner(BannerModel(**payload.model_dump()))
        logger.info(f"Utworzono baner {banner.id} (pozycja {banner.position})")
        return banner

    def update_banner(self, banner_id: int, payload: BannerUpdate) -> BannerModel:
        banner = self.get_banner(banner_id)
        data = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_BANNER_FIELDS
        }
        banner = self.repo.update_banner(banner, data)
        logger.info(f"Zaktualizowano baner {banner.id}")
        return banner

    def delete_banner(self, banner_id: int) -> None:
        banner = self.get_banner(banner_id)
        self.repo.delete_banner(banner)
        logger.info(f"Usunieto baner {banner_id}")
