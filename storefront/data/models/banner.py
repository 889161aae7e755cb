from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, DateTime

from storefront.data.database import Base


class BannerModel(Base):
    """Baner na stronie glownej; kolejnosc wg position."""

    __tablename__ = "banners"

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    subtitle = Column(String(300), nullable=True)
    desktop_image_url = Column(String(500), nullable=False)
    mobile_image_url = Column(String(500), nullable=False)
    alt = Column(String(200), nullable=False)
    link_url = Column(String(500), nullable=True)
    enabled = Column(Boolean, nullable=False, default=True)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
