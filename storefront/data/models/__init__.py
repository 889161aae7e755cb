#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.free_product import FreeProductModel
from storefront.data.models.banner import BannerModel

__all__ = ["CategoryModel", "ProductModel", "CartModel", "CartItemModel", "FreeProductModel", "BannerModel"]
