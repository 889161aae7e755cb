# storefront/services/catalog_service.py
import math
from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import ConflictError, NotFoundError, ValidationError
from storefront.domain.schemas import (
    CategoryIn,
    CategoryUpdate,
    ProductIn,
    ProductOut,
    ProductPage,
    ProductUpdate,
)
from storefront.repos.category_repo import CategoryRepo
from storefront.repos.product_repo import ProductFilter, ProductRepo, COLLECTIONS, SORTS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100

# null w PUT czysci tylko te pola; dla pozostalych jest pomijany
NULLABLE_PRODUCT_FIELDS = {"short_description", "discounted_price", "category_id"}
NULLABLE_CATEGORY_FIELDS = {"description", "image_url"}


class CatalogService:
    """
    Katalog produktow i kategorii.
    Usuniecie produktu nie rusza pozycji koszykow ani regul gratisow -
    osierocone odwolania sa pomijane przy odczycie.
    """

    def __init__(self, db: Session):
        self.products = ProductRepo(db)
        self.categories = CategoryRepo(db)

    # =====================================================
    # PRODUKTY
    # =====================================================
    def list_products(self, flt: ProductFilter) -> ProductPage:
        if flt.page < 1:
            raise ValidationError("page musi byc >= 1")
        if not 1 <= flt.limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"limit musi byc w zakresie 1..{MAX_PAGE_SIZE}")
        if flt.sort not in SORTS:
            raise ValidationError(f"Nieznane sortowanie: {flt.sort}")
        if flt.collection and flt.collection not in COLLECTIONS:
            raise ValidationError(f"Nieznana kolekcja: {flt.collection}")
        if flt.min_price is not None and flt.max_price is not None and flt.min_price > flt.max_price:
            raise ValidationError("minPrice wieksze niz maxPrice")

        items, total = self.products.list_products(flt)
        return ProductPage(
            items=[ProductOut.model_validate(p) for p in items],
            total=total,
            page=flt.page,
            limit=flt.limit,
            pages=math.ceil(total / flt.limit) if total else 0,
        )

    def get_product(self, product_id: int) -> ProductModel:
        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Produkt", product_id)
        return product

    def get_product_by_slug(self, slug: str) -> ProductModel:
        product = self.products.get_by_slug(slug)
        if not product:
            raise NotFoundError("Produkt", slug)
        return product

    def create_product(self, payload: ProductIn) -> ProductModel:
        data = payload.model_dump()
        self._check_product_unique(data)
        self._check_category(data.get("category_id"))

        product = self.products.create_product(ProductModel(**data))
        logger.info(f"Utworzono produkt {product.id} ({product.slug})")
        return product

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        product = self.get_product(product_id)
        data = self._changes(payload, NULLABLE_PRODUCT_FIELDS)
        self._check_product_unique(data, current=product)
        if "category_id" in data:
            self._check_category(data["category_id"])

        product = self.products.update_product(product, data)
        logger.info(f"Zaktualizowano produkt {product.id}")
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)
        self.products.delete_product(product)
        logger.info(f"Usunieto produkt {product_id}")

    # =====================================================
    # KATEGORIE
    # =====================================================
    def list_categories(self) -> List[CategoryModel]:
        return self.categories.list_categories()

    def get_category(self, category_id: int) -> CategoryModel:
        category = self.categories.get_category(category_id)
        if not category:
            raise NotFoundError("Kategoria", category_id)
        return category

    def get_category_by_slug(self, slug: str) -> CategoryModel:
        category = self.categories.get_by_slug(slug)
        if not category:
            raise NotFoundError("Kategoria", slug)
        return category

    def create_category(self, payload: CategoryIn) -> CategoryModel:
        if self.categories.get_by_slug(payload.slug):
            raise ConflictError(f"Kategoria o slugu {payload.slug} juz istnieje")

        category = self.categories.create_category(CategoryModel(**payload.model_dump()))
        logger.info(f"Utworzono kategorie {category.id} ({category.slug})")
        return category

    def update_category(self, category_id: int, payload: CategoryUpdate) -> CategoryModel:
        category = self.get_category(category_id)
        data = self._changes(payload, NULLABLE_CATEGORY_FIELDS)

        slug = data.get("slug")
        if slug and slug != category.slug and self.categories.get_by_slug(slug):
            raise ConflictError(f"Kategoria o slugu {slug} juz istnieje")

        return self.categories.update_category(category, data)

    def delete_category(self, category_id: int) -> None:
        category = self.get_category(category_id)
        if self.products.count_in_category(category_id):
            raise ConflictError("Kategoria ma przypisane produkty")

        self.categories.delete_category(category)
        logger.info(f"Usunieto kategorie {category_id}")

    #helpers
    @staticmethod
    def _changes(payload, nullable: set) -> dict:
        return {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in nullable
        }

    def _check_product_unique(self, data: dict, current: ProductModel | None = None) -> None:
        slug = data.get("slug")
        if slug and (current is None or slug != current.slug) and self.products.get_by_slug(slug):
            raise ConflictError(f"Produkt o slugu {slug} juz istnieje")

        sku = data.get("sku")
        if sku and (current is None or sku != current.sku) and self.products.get_by_sku(sku):
            raise ConflictError(f"Produkt o SKU {sku} juz istnieje")

    def _check_category(self, category_id: int | None) -> None:
        if category_id is not None and not self.categories.get_category(category_id):
            raise ValidationError(f"Kategoria {category_id} nie istnieje")
