# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import BannerModel, CategoryModel, FreeProductModel, ProductModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = [
    {"name": "Herbal Teas", "slug": "herbal-teas"},
    {"name": "Skin Care", "slug": "skin-care"},
]

PRODUCTS = [
    {"name": "Tulsi Green Tea", "sku": "TEA-001", "slug": "tulsi-green-tea", "price": Decimal("300.00"), "category": "herbal-teas", "featured": True},
    {"name": "Ashwagandha Blend", "sku": "TEA-002", "slug": "ashwagandha-blend", "price": Decimal("450.00"), "category": "herbal-teas", "bestseller": True},
    {"name": "Neem Face Wash", "sku": "SKN-001", "slug": "neem-face-wash", "price": Decimal("199.00"), "category": "skin-care", "is_new": True},
    {"name": "Sample Sachet", "sku": "GFT-001", "slug": "sample-sachet", "price": Decimal("49.00"), "category": "herbal-teas"},
    {"name": "Travel Pouch", "sku": "GFT-002", "slug": "travel-pouch", "price": Decimal("149.00"), "category": "skin-care"},
]

# produkt -> prog gratisu
FREE_RULES = {
    "sample-sachet": Decimal("500.00"),
    "travel-pouch": Decimal("1000.00"),
}

BANNERS = [
    {"title": "Herbal Week", "subtitle": "Gratis od 500", "alt": "Herbal teas", "link_url": "/collections/featured", "position": 0},
    {"title": "Skin Care", "alt": "Skin care", "link_url": "/categories/skin-care", "position": 1},
]


def seed():
    import storefront.data.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # tylko pusta baza
        if db.query(ProductModel).first():
            logger.info("Seed pominiety - baza nie jest pusta")
            return

        categories = {}
        for data in CATEGORIES:
            category = CategoryModel(**data)
            db.add(category)
            categories[data["slug"]] = category
        db.flush()

        products = {}
        for data in PRODUCTS:
            data = dict(data)
            category = categories[data.pop("category")]
            product = ProductModel(category_id=category.id, image_url=f"/images/{data['slug']}.jpg", **data)
            db.add(product)
            products[data["slug"]] = product
        db.flush()

        for slug, threshold in FREE_RULES.items():
            db.add(FreeProductModel(product_id=products[slug].id, min_order_value=threshold))

        for data in BANNERS:
            image = f"/images/banners/{data['position']}.jpg"
            db.add(BannerModel(desktop_image_url=image, mobile_image_url=image, **data))

        db.commit()
        logger.info(f"Seed: {len(categories)} kategorii, {len(products)} produktow, {len(FREE_RULES)} regul, {len(BANNERS)} banerow")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
