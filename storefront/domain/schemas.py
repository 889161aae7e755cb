# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, model_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from decimal import Decimal
from datetime import datetime


class ApiModel(BaseModel):
    """Baza dla schematow API - camelCase w JSON, snake_case w Pythonie."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ===================== katalog =====================

class CategoryIn(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    image_url: Optional[str] = None


class CategoryUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    image_url: Optional[str] = None


class CategoryOut(ApiModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None


class ProductIn(ApiModel):
    """Schema dla tworzenia produktu."""

    name: str = Field(..., min_length=1, max_length=200)
    sku: str = Field(..., min_length=1, max_length=64)
    slug: str = Field(..., min_length=1, max_length=200, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: str = ""
    short_description: Optional[str] = None
    price: Decimal = Field(..., ge=0, decimal_places=2)
    discounted_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    image_url: str = ""
    stock: int = Field(0, ge=0)
    category_id: Optional[int] = None
    featured: bool = False
    bestseller: bool = False
    is_new: bool = False


class ProductUpdate(ApiModel):
    """Schema dla aktualizacji produktu - tylko podane pola."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    sku: Optional[str] = Field(None, min_length=1, max_length=64)
    slug: Optional[str] = Field(None, min_length=1, max_length=200, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    discounted_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    image_url: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    category_id: Optional[int] = None
    featured: Optional[bool] = None
    bestseller: Optional[bool] = None
    is_new: Optional[bool] = None


class ProductOut(ApiModel):
    id: int
    name: str
    sku: str
    slug: str
    description: str
    short_description: Optional[str] = None
    price: Decimal
    discounted_price: Optional[Decimal] = None
    image_url: str
    stock: int
    category_id: Optional[int] = None
    featured: bool
    bestseller: bool
    is_new: bool


class ProductPage(ApiModel):
    items: List[ProductOut]
    total: int
    page: int
    limit: int
    pages: int


# ===================== banery =====================

class BannerIn(ApiModel):
    """
    Schema dla tworzenia baneru.
    image_url to skrot: jeden obrazek dla desktopu i mobile.
    """

    title: str = Field(..., min_length=1, max_length=200)
    subtitle: Optional[str] = Field(None, max_length=300)
    alt: str = Field(..., min_length=1, max_length=200)
    link_url: Optional[str] = Field(None, max_length=500)
    enabled: bool = True
    position: int = 0
    desktop_image_url: Optional[str] = Field(None, min_length=1, max_length=500)
    mobile_image_url: Optional[str] = Field(None, min_length=1, max_length=500)
    image_url: Optional[str] = Field(None, min_length=1, max_length=500, exclude=True)

    @model_validator(mode="after")
    def fill_images(self):
        self.desktop_image_url = self.desktop_image_url or self.image_url
        self.mobile_image_url = self.mobile_image_url or self.image_url
        if not self.desktop_image_url:
            raise ValueError("desktopImageUrl albo imageUrl jest wymagany")
        if not self.mobile_image_url:
            raise ValueError("mobileImageUrl albo imageUrl jest wymagany")
        return self


class BannerUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    subtitle: Optional[str] = Field(None, max_length=300)
    alt: Optional[str] = Field(None, min_length=1, max_length=200)
    link_url: Optional[str] = Field(None, max_length=500)
    enabled: Optional[bool] = None
    position: Optional[int] = None
    desktop_image_url: Optional[str] = Field(None, min_length=1, max_length=500)
    mobile_image_url: Optional[str] = Field(None, min_length=1, max_length=500)


class BannerOut(ApiModel):
    id: int
    title: str
    subtitle: Optional[str] = None
    desktop_image_url: str
    mobile_image_url: str
    alt: str
    link_url: Optional[str] = None
    enabled: bool
    position: int


# ===================== koszyk =====================

class AddItemIn(ApiModel):
    """Schema dla dodawania produktu do koszyka."""

    cart_id: int
    product_id: int
    # quantity >= 1 sprawdza serwis (ValidationError -> 400)
    quantity: int
    is_free: bool = False


class UpdateQuantityIn(ApiModel):
    quantity: int


class CartLineItemOut(ApiModel):
    id: int
    cart_id: int
    product_id: int
    quantity: int
    is_free: bool


class DeletedItemOut(ApiModel):
    """Znacznik usuniecia - PUT z quantity <= 0."""

    id: int
    deleted: bool = True


class CartLineOut(CartLineItemOut):
    product: ProductOut


class CartOut(ApiModel):
    """Schema dla koszyka (response)."""

    id: int
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    items: List[CartLineOut]
    subtotal: Decimal
    total_items: int


class EligibleFreeProductOut(ApiModel):
    free_product_id: int
    min_order_value: Decimal
    product: ProductOut


class AddFreeProductIn(ApiModel):
    product_id: int
    free_product_id: int


# ===================== reguly gratisow =====================

class FreeProductRuleIn(ApiModel):
    product_id: int = Field(..., gt=0)
    min_order_value: Decimal = Field(..., ge=0, decimal_places=2)


class FreeProductRuleUpdate(ApiModel):
    product_id: Optional[int] = Field(None, gt=0)
    min_order_value: Optional[Decimal] = Field(None, ge=0, decimal_places=2)


class FreeProductRuleOut(ApiModel):
    id: int
    product_id: int
    min_order_value: Decimal
    created_at: Optional[datetime] = None
    # None gdy produkt zostal usuniety
    product: Optional[ProductOut] = None


class HealthOut(BaseModel):
    status: str
    database: str
