# storefront/api/__init__.py
from fastapi import APIRouter

from storefront.api.routers import banners, carts, categories, free_products, health, products

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(products.router)
api_router.include_router(categories.router)
api_router.include_router(banners.router)
api_router.include_router(carts.router)
api_router.include_router(free_products.router)
