from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Numeric, DateTime

from storefront.data.database import Base


class FreeProductModel(Base):
    """Regula promocji: produkt gratis od podanej wartosci zamowienia."""

    __tablename__ = "free_products"

    id = Column(Integer, primary_key=True)
    #jedna regula na produkt
    product_id = Column(Integer, nullable=False, unique=True)
    min_order_value = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
